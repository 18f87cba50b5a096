from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from bson import ObjectId
from pymongo.database import Database

from eventhub import config
from eventhub.models.booking import check_event_reference, normalize_booking

logger = logging.getLogger(__name__)


def create_booking(db: Database, fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate and insert a booking. The referenced event must exist at this
    moment; nothing is written otherwise.
    """
    doc = normalize_booking(fields)
    check_event_reference(db, doc["event_id"])

    now = datetime.now(timezone.utc)
    doc.update({"created_at": now, "updated_at": now})
    res = db[config.BOOKINGS_COLLECTION].insert_one(doc)
    doc["_id"] = res.inserted_id
    logger.info("booking %s created for event %s", doc["_id"], doc["event_id"])
    return doc


def bookings_for_event(db: Database, event_id: ObjectId) -> List[Dict[str, Any]]:
    cur = db[config.BOOKINGS_COLLECTION].find({"event_id": event_id}).sort("created_at", 1)
    return list(cur)
