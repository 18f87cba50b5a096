from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from eventhub.store.events import find_event_by_slug, find_similar_events_by_slug
from eventhub.utils.documents import jsonable

bp = Blueprint("api_events", __name__)


def _clean_slug(slug) -> str | None:
    if not slug or not isinstance(slug, str) or not slug.strip():
        return None
    return slug.strip().lower()


def _bad_slug():
    return jsonify({"message": "Invalid or missing slug parameter"}), 400


@bp.get("/events/", defaults={"slug": ""})
@bp.get("/events/<slug>")
def get_event(slug: str):
    """
    GET /api/events/<slug>
    Fetch one event by slug (case-insensitive).
    """
    clean = _clean_slug(slug)
    if clean is None:
        return _bad_slug()

    try:
        db = current_app.extensions["mongo"].get_db()
        event = find_event_by_slug(db, clean)
        if not event:
            return jsonify({"message": f"Event with slug '{clean}' not found"}), 404

        return jsonify({"message": "Event fetched successfully", "event": jsonable(event)}), 200
    except Exception as e:
        current_app.logger.error("Error fetching event by slug %r: %s", slug, e)
        if "MONGODB_URI" in str(e):
            return jsonify({"message": "Database configuration error"}), 500
        return jsonify({"message": "Failed to fetch event", "error": str(e)}), 500


@bp.get("/events/<slug>/similar")
def similar_events(slug: str):
    """
    GET /api/events/<slug>/similar
    Other events sharing a tag with this one; empty list when there are none.
    """
    clean = _clean_slug(slug)
    if clean is None:
        return _bad_slug()
    try:
        db = current_app.extensions["mongo"].get_db()
    except Exception as e:
        current_app.logger.error("Error connecting for similar events %r: %s", slug, e)
        return jsonify({"message": "Similar events fetched successfully", "events": []}), 200

    events = find_similar_events_by_slug(db, clean)
    return jsonify({"message": "Similar events fetched successfully", "events": jsonable(events)}), 200
