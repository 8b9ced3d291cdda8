"""
In-process event log for moderator analytics.

Only the most recent events are kept; older ones drop off as new page
views, filters and actions arrive.
"""
from __future__ import annotations

import time
from collections import deque
from typing import Any

from ..config import DEFAULT_APP_CONFIG

EVENT_TYPES = ("load", "submit", "confirm", "report", "filter")

_events: deque[dict[str, Any]] = deque(maxlen=DEFAULT_APP_CONFIG.max_events)


def record_event(event_type: str, data: dict[str, Any]) -> None:
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type!r}")
    _events.append({
        "type": event_type,
        "timestamp": time.time(),
        **data,
    })


def record_load(source: str, count: int) -> None:
    """``source`` is ``remote`` or ``demo``."""
    record_event("load", {"source": source, "count": count})


def record_corroboration(event_type: str, record_id: str, demo: bool) -> None:
    record_event(event_type, {"record_id": record_id, "demo": demo})


def record_submission(record_id: str, features: list[str]) -> None:
    record_event("submit", {"record_id": record_id, "features": list(features)})


def record_filter(active_features: set[str]) -> None:
    record_event("filter", {"active": sorted(active_features)})


def get_events(event_type: str | None = None) -> list[dict[str, Any]]:
    if event_type is None:
        return list(_events)
    return [e for e in _events if e["type"] == event_type]


def clear_events() -> None:
    _events.clear()
