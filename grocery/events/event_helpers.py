"""Event helper utilities.

Helpers the repository calls after each committed write so every viewer of
the list hears about it.

Quick import:
    from grocery.events.event_helpers import publish_item_added, publish_item_updated
"""
from __future__ import annotations
from typing import Any, Iterable, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    ITEM_ADDED, ITEM_UPDATED, ITEM_REMOVED, ITEMS_CLEARED,
    STORE_ADDED, STORE_UPDATED, STORE_REMOVED,
)

__all__ = [
    'publish_item_added', 'publish_item_updated', 'publish_item_removed', 'publish_items_cleared',
    'publish_store_added', 'publish_store_updated', 'publish_store_removed',
]


def _bus(bus: Optional[EventBus]) -> EventBus:
    return bus if bus is not None else GLOBAL_EVENT_BUS


def publish_item_added(item: Any, bus: Optional[EventBus] = None):
    _bus(bus).publish(ITEM_ADDED, {'item': item})


def publish_item_updated(item: Any, fields: Iterable[str], bus: Optional[EventBus] = None):
    _bus(bus).publish(ITEM_UPDATED, {'item': item, 'fields': sorted(fields)})


def publish_item_removed(item_id: str, name: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(ITEM_REMOVED, {'item_id': item_id, 'name': name})


def publish_items_cleared(item_ids: Iterable[str], bus: Optional[EventBus] = None):
    """Publish one event for a bulk sweep.

    Payload structure:
        {'item_ids': [<id>, ...], 'count': <int>}
    """
    ids = list(item_ids)
    _bus(bus).publish(ITEMS_CLEARED, {'item_ids': ids, 'count': len(ids)})


def publish_store_added(store: Any, bus: Optional[EventBus] = None):
    _bus(bus).publish(STORE_ADDED, {'store': store})


def publish_store_updated(store: Any, bus: Optional[EventBus] = None):
    _bus(bus).publish(STORE_UPDATED, {'store': store})


def publish_store_removed(store_id: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(STORE_REMOVED, {'store_id': store_id})
