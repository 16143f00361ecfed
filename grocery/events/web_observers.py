"""Web-facing observers for grocery list changes.

Subscribes to every grocery.* event on the bus and keeps a lightweight
in-memory ring buffer of recent changes. Viewers poll the FastAPI endpoint
with since=<last_id_seen> and refetch the list when anything new shows up, so
every open list converges without a manual refresh.

Design:
  * Each event gets an auto-increment integer id (cursor).
  * A Lock guards the buffer; with several worker processes each keeps its
    own buffer, which is fine for change hints.
  * MAX_EVENTS caps memory.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from grocery.utilities.config import GROCERY_EVENTS_MAX
from .Event_Bus import ALL_EVENTS, EventBus, GLOBAL_EVENT_BUS

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = GROCERY_EVENTS_MAX
_started_on: Optional[EventBus] = None


def _summarize(payload: Any) -> Dict[str, Any]:
    summary: Dict[str, Any] = {}
    if not isinstance(payload, dict):
        return summary
    item = payload.get('item')
    if item is not None and hasattr(item, 'id'):
        summary['item_id'] = item.id
        summary['name'] = item.name
        summary['store_id'] = item.store_id
    store = payload.get('store')
    if store is not None and hasattr(store, 'id'):
        summary['store_id'] = store.id
        summary['name'] = store.name
    for k in ('item_id', 'item_ids', 'store_id', 'name', 'count', 'fields'):
        if k in payload and k not in summary:
            summary[k] = payload[k]
    return summary


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat(),
        }
        evt.update(_summarize(payload))
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start(bus: EventBus = GLOBAL_EVENT_BUS):
    """Idempotent start: subscribe observers once per bus."""
    global _started_on
    if _started_on is bus:
        return
    for name in ALL_EVENTS:
        bus.subscribe(name, _record)
    _started_on = bus
    logger.debug("Web observers subscribed to %d grocery events", len(ALL_EVENTS))


def stop():
    global _started_on
    if _started_on is None:
        return
    for name in ALL_EVENTS:
        _started_on.unsubscribe(name, _record)
    _started_on = None


def reset():
    """Drop buffered events (cursor keeps counting)."""
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


__all__ = ['start', 'stop', 'reset', 'get_events']
