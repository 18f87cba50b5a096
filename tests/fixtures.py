from __future__ import annotations

from typing import Any, Dict


def make_event(**overrides: Any) -> Dict[str, Any]:
    """A complete, valid event payload; override any field per test."""
    data: Dict[str, Any] = {
        "title": "Cloud Native Summit 2025",
        "description": "Two days of talks on Kubernetes and serverless.",
        "overview": "Hands-on sessions and keynotes.",
        "image": "/images/event1.png",
        "venue": "Moscone Center",
        "location": "San Francisco, CA",
        "date": "2025-11-07",
        "time": "09:00 AM",
        "mode": "hybrid",
        "audience": "Developers, SREs",
        "agenda": ["Registration", "Keynote", "Workshops"],
        "organizer": "CNCF",
        "tags": ["cloud", "kubernetes"],
    }
    data.update(overrides)
    return data
