from __future__ import annotations

from eventhub.store.events import save_event
from fixtures import make_event


def test_get_event_by_slug(app_client, db):
    saved = save_event(db, make_event())

    r = app_client.get("/api/events/cloud-native-summit-2025")

    assert r.status_code == 200
    body = r.get_json()
    assert body["message"] == "Event fetched successfully"
    assert body["event"]["_id"] == str(saved["_id"])
    assert body["event"]["slug"] == "cloud-native-summit-2025"
    assert body["event"]["agenda"] == ["Registration", "Keynote", "Workshops"]
    assert isinstance(body["event"]["created_at"], str)


def test_mixed_case_slug_resolves_same_event(app_client, db):
    save_event(db, make_event(slug="my-slug"))

    lower = app_client.get("/api/events/my-slug").get_json()
    mixed = app_client.get("/api/events/My-Slug").get_json()

    assert mixed["event"]["_id"] == lower["event"]["_id"]


def test_unknown_slug_is_404(app_client):
    r = app_client.get("/api/events/nonexistent-slug")

    assert r.status_code == 404
    assert "nonexistent-slug" in r.get_json()["message"]


def test_blank_slug_is_400(app_client):
    r = app_client.get("/api/events/")
    assert r.status_code == 400
    assert r.get_json() == {"message": "Invalid or missing slug parameter"}

    r = app_client.get("/api/events/%20%20")
    assert r.status_code == 400


def test_config_error_is_reported_as_such(app_client, app, monkeypatch):
    def boom():
        raise RuntimeError("MONGODB_URI is not set")

    monkeypatch.setattr(app.extensions["mongo"], "get_db", boom)

    r = app_client.get("/api/events/anything")

    assert r.status_code == 500
    assert r.get_json() == {"message": "Database configuration error"}


def test_generic_failure_includes_error(app_client, app, monkeypatch):
    def boom():
        raise RuntimeError("connection reset")

    monkeypatch.setattr(app.extensions["mongo"], "get_db", boom)

    r = app_client.get("/api/events/anything")

    assert r.status_code == 500
    assert r.get_json() == {"message": "Failed to fetch event", "error": "connection reset"}


def test_similar_events_endpoint(app_client, db):
    save_event(db, make_event())
    save_event(db, make_event(title="KubeDay", tags=["kubernetes"]))
    save_event(db, make_event(title="Frontend Camp", tags=["react"]))

    r = app_client.get("/api/events/Cloud-Native-Summit-2025/similar")

    assert r.status_code == 200
    assert [e["slug"] for e in r.get_json()["events"]] == ["kubeday"]


def test_similar_events_unknown_slug_is_empty(app_client):
    r = app_client.get("/api/events/missing/similar")
    assert r.status_code == 200
    assert r.get_json()["events"] == []
