from __future__ import annotations

import json

import pytest

import cli
from fixtures import make_event


@pytest.fixture()
def cli_provider(monkeypatch, provider):
    monkeypatch.setattr(cli, "_provider", lambda: provider)
    return provider


def test_events_load_and_show(tmp_path, cli_provider, db, capsys):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([make_event(), make_event(title="KubeDay", tags=["kubernetes"])]))

    cli.cmd_events_load(str(path))
    out = capsys.readouterr().out
    assert "Saved 2 events" in out
    assert db["events"].count_documents({}) == 2

    cli.cmd_events_show("KubeDay")
    shown = json.loads(capsys.readouterr().out)
    assert shown["slug"] == "kubeday"


def test_booking_add_and_list(cli_provider, db, capsys):
    from eventhub.store.events import save_event

    event = save_event(db, make_event())
    cli.cmd_booking_add(str(event["_id"]), "Guest@Example.com")
    assert "guest@example.com" in capsys.readouterr().out

    cli.cmd_booking_list("cloud-native-summit-2025")
    rows = json.loads(capsys.readouterr().out)
    assert [r["email"] for r in rows] == ["guest@example.com"]


def test_events_show_unknown_slug_exits(cli_provider):
    with pytest.raises(SystemExit):
        cli.cmd_events_show("missing")
