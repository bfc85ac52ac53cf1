"""Web-facing observers for engine events.

This module subscribes to the GLOBAL_EVENT_BUS for every engine event and
stores a lightweight in-memory ring buffer of recent events that can be
queried by the web layer (GET /api/events) to surface unassignable slots and
data-quality problems without re-reading the plan store.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * Thread-safety ensured with a simple Lock (uvicorn workers may share the
    process; multi-process deployments keep one buffer per process).
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    GLOBAL_EVENT_BUS, PLAN_UNASSIGNABLE, PLAN_COMPOSED, SAFETY_REFERENCE_UNAVAILABLE,
    ALLERGY_UNKNOWN_CODE, DISEASE_UNKNOWN_CODE, NUTRIENTS_INVALID,
)

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started = False

OBSERVED_EVENTS = (
    PLAN_UNASSIGNABLE, PLAN_COMPOSED, SAFETY_REFERENCE_UNAVAILABLE,
    ALLERGY_UNKNOWN_CODE, DISEASE_UNKNOWN_CODE, NUTRIENTS_INVALID,
)


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat(),
        }
        if isinstance(payload, dict):
            for k, v in payload.items():
                evt.setdefault(k, v)
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in OBSERVED_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True
    logger.debug("Web observers subscribed to %d event types", len(OBSERVED_EVENTS))


def clear():
    """Drop buffered events (the cursor keeps counting)."""
    with _lock:
        _events.clear()


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the last N (up to MAX_EVENTS) events.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'clear', 'get_events']
