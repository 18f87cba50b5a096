from __future__ import annotations

from datetime import datetime
from typing import Any

from bson import ObjectId


def jsonable(value: Any) -> Any:
    """Turn a Mongo document into plain JSON types (ObjectId -> str, datetime -> ISO)."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value
