from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database
from pymongo.errors import PyMongoError

from eventhub import config
from eventhub.errors import MissingEventError, ReferenceCheckError, ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not value:
        raise ValidationError("event_id", "Event ID is required")
    try:
        return ObjectId(str(value).strip())
    except (InvalidId, TypeError) as e:
        raise ValidationError("event_id", f"'{value}' is not a valid event ID") from e


def normalize_booking(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    """Return {event_id, email} with the id coerced and the email trimmed/lowercased."""
    event_id = _object_id(candidate.get("event_id"))

    email = candidate.get("email")
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("email", "Email is required")
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("email", "Please provide a valid email address")

    return {"event_id": event_id, "email": email}


def check_event_reference(db: Database, event_id: ObjectId) -> None:
    """
    Verify the booked event exists right now.

    Only checked when the booking is written; deleting the event later leaves
    the booking in place.
    """
    try:
        found = db[config.EVENTS_COLLECTION].find_one({"_id": event_id}, {"_id": 1})
    except PyMongoError as e:
        raise ReferenceCheckError(f"Error validating event: {e}") from e
    if found is None:
        raise MissingEventError(event_id)
