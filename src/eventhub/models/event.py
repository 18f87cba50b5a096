"""
Event document normalization and validation.

``normalize_event`` runs on every create/update before anything is written.
It derives the slug, puts date and time into their canonical forms and checks
that every required field is filled in. It never mutates its inputs: the
caller gets back a fresh document or a ``ValidationError`` naming the field.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as dateutil_parser

from eventhub.errors import ValidationError

logger = logging.getLogger(__name__)

REQUIRED_STRING_FIELDS: List[str] = [
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
]
REQUIRED_LIST_FIELDS: List[str] = ["agenda", "tags"]

STRING_FIELDS = ["slug"] + REQUIRED_STRING_FIELDS

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
PLAIN_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
TIME_PARTS_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)?", re.IGNORECASE)

INVALID_DATE = "Invalid date format. Expected YYYY-MM-DD or a valid date string"

# dateutil fills missing parts from `default`; two different defaults expose them
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def slugify(text: str) -> str:
    """
    Lowercase, drop everything but word chars/whitespace/hyphens, then hyphenate.

    >>> slugify("  PyCon DE & PyData 2025! ")
    'pycon-de-pydata-2025'
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def normalize_date(value: str) -> str:
    """
    Pass ``YYYY-MM-DD`` through, reformat any other full calendar date.

    Blank values are returned as-is so the required-field check reports them.
    Input lacking a year, month or day ("May", "10:30") is rejected.
    """
    value = value.strip()
    if not value or DATE_RE.match(value):
        return value
    try:
        parsed, check = (dateutil_parser.parse(value, default=d) for d in _PARSE_DEFAULTS)
    except (ValueError, OverflowError) as e:
        raise ValidationError("date", INVALID_DATE) from e
    if (parsed.year, parsed.month, parsed.day) != (check.year, check.month, check.day):
        raise ValidationError("date", INVALID_DATE)
    return f"{parsed.year}-{parsed.month:02d}-{parsed.day:02d}"


def normalize_time(value: str) -> str:
    """
    Canonical time is ``HH:MM`` in 24h form, optionally tagged with the
    meridiem it was entered with: ``"2:30 PM"`` becomes ``"14:30 PM"``.

    Plain ``H:MM``/``HH:MM`` values are kept as entered. Values without any
    ``H:MM`` part are left untouched.
    """
    value = value.strip()
    if PLAIN_TIME_RE.match(value):
        return value

    m = TIME_PARTS_RE.search(value)
    if not m:
        logger.warning("time %r not recognised; stored as entered", value)
        return value

    hours = int(m.group(1))
    minutes = m.group(2)
    period = (m.group(3) or "").upper()

    if period == "PM" and hours < 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    return f"{hours:02d}:{minutes} {period}".strip()


def _is_modified(field: str, candidate: Mapping[str, Any], previous: Optional[Mapping[str, Any]]) -> bool:
    if field not in candidate:
        return False
    if previous is None:
        return True
    return candidate[field] != previous.get(field)


def _trimmed(doc: Dict[str, Any]) -> Dict[str, Any]:
    for field in STRING_FIELDS:
        if isinstance(doc.get(field), str):
            doc[field] = doc[field].strip()
    for field in REQUIRED_LIST_FIELDS:
        if isinstance(doc.get(field), (list, tuple)):
            doc[field] = [v.strip() if isinstance(v, str) else v for v in doc[field]]
    return doc


def validate_required(doc: Mapping[str, Any]) -> None:
    """Raise on the first missing/blank required field, in a fixed order."""
    for field in REQUIRED_STRING_FIELDS:
        value = doc.get(field)
        if not value or (isinstance(value, str) and not value.strip()):
            raise ValidationError(field, f"{field} cannot be empty")
        if not isinstance(value, str):
            raise ValidationError(field, f"{field} must be a string")

    for field in REQUIRED_LIST_FIELDS:
        value = doc.get(field)
        if not isinstance(value, (list, tuple)) or len(value) == 0:
            raise ValidationError(field, f"{field} must be a non-empty list")


def normalize_event(
    candidate: Mapping[str, Any],
    previous: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Return the normalized document to persist.

    ``candidate`` holds the fields being written; on update ``previous`` is the
    stored document and the two are merged. Only modified fields are
    re-normalized, so a stored slug survives updates that leave the title alone.
    """
    candidate = _trimmed(dict(candidate))
    doc: Dict[str, Any] = _trimmed(dict(previous or {}))
    doc.update(candidate)

    slug_given = _is_modified("slug", candidate, previous) and bool(candidate.get("slug"))
    if slug_given:
        if not isinstance(candidate["slug"], str):
            raise ValidationError("slug", "slug must be a string")
        doc["slug"] = slugify(candidate["slug"])
    elif _is_modified("title", candidate, previous) or not doc.get("slug"):
        title = doc.get("title")
        doc["slug"] = slugify(title) if isinstance(title, str) else ""

    if _is_modified("date", candidate, previous) and isinstance(doc.get("date"), str):
        doc["date"] = normalize_date(doc["date"])

    if _is_modified("time", candidate, previous) and isinstance(doc.get("time"), str):
        doc["time"] = normalize_time(doc["time"])

    validate_required(doc)

    if not doc["slug"]:
        raise ValidationError("slug", f"title {doc['title']!r} has no characters usable in a slug")

    doc["agenda"] = list(doc["agenda"])
    doc["tags"] = list(doc["tags"])
    return doc
