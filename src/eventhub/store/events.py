from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from eventhub import config
from eventhub.errors import EventNotFoundError, ValidationError
from eventhub.models.event import normalize_event

logger = logging.getLogger(__name__)


def _events(db: Database):
    return db[config.EVENTS_COLLECTION]


def find_event_by_slug(db: Database, slug: str) -> Optional[Dict[str, Any]]:
    """
    Exact, case-insensitive slug lookup. Returns None when nothing matches;
    storage errors propagate.
    """
    return _events(db).find_one({"slug": slug.strip().lower()})


def find_similar_events_by_slug(db: Database, slug: str) -> List[Dict[str, Any]]:
    """
    Other events sharing at least one tag with the event behind `slug`.
    Unknown slug, no matches and storage errors all come back as [].
    """
    try:
        event = find_event_by_slug(db, slug)
        if not event:
            return []
        cur = _events(db).find({"_id": {"$ne": event["_id"]}, "tags": {"$in": event.get("tags", [])}})
        return list(cur)
    except Exception as e:
        logger.warning("similar events lookup failed for %r: %s", slug, e)
        return []


def save_event(db: Database, fields: Mapping[str, Any], event_id: Optional[ObjectId] = None) -> Dict[str, Any]:
    """
    Normalize and persist an event; creates when `event_id` is None, otherwise
    applies `fields` on top of the stored document.
    Returns the stored document (with `_id`).
    """
    coll = _events(db)
    previous = None
    if event_id is not None:
        previous = coll.find_one({"_id": event_id})
        if previous is None:
            raise EventNotFoundError(f"Event with ID {event_id} does not exist")

    doc = normalize_event(fields, previous)
    now = datetime.now(timezone.utc)
    doc["updated_at"] = now

    try:
        if previous is None:
            doc.pop("_id", None)
            doc["created_at"] = now
            res = coll.insert_one(doc)
            doc["_id"] = res.inserted_id
        else:
            doc["_id"] = previous["_id"]
            doc["created_at"] = previous.get("created_at", now)
            coll.replace_one({"_id": previous["_id"]}, doc)
    except DuplicateKeyError as e:
        raise ValidationError("slug", f"slug '{doc['slug']}' is already in use") from e

    logger.info("saved event %s (%s)", doc["slug"], doc["_id"])
    return doc
