from __future__ import annotations

from typing import Any


class ConfigError(RuntimeError):
    """Required configuration is missing or unusable."""


class DatabaseConnectionError(RuntimeError):
    """MongoDB could not be reached, or the client never reached a connected state."""


class ValidationError(ValueError):
    """A document failed normalization or validation; nothing was written."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(reason)


class MissingEventError(ValidationError):
    def __init__(self, event_id: Any):
        self.event_id = event_id
        super().__init__("event_id", f"Event with ID {event_id} does not exist")


class ReferenceCheckError(RuntimeError):
    """The referenced-event lookup itself failed (storage unavailable etc.)."""


class EventNotFoundError(LookupError):
    pass
