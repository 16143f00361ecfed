"""Simple Event Bus / Observer implementation for grocery list changes.

Event names used so far:
  grocery.item_added    -> payload {"item": GroceryItem}
  grocery.item_updated  -> payload {"item": GroceryItem, "fields": [str, ...]}
  grocery.item_removed  -> payload {"item_id": str, "name": str}
  grocery.items_cleared -> payload {"item_ids": [str, ...], "count": int}
  grocery.store_added / grocery.store_updated -> payload {"store": Store}
  grocery.store_removed -> payload {"store_id": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
ITEM_ADDED = "grocery.item_added"
ITEM_UPDATED = "grocery.item_updated"
ITEM_REMOVED = "grocery.item_removed"
ITEMS_CLEARED = "grocery.items_cleared"
STORE_ADDED = "grocery.store_added"
STORE_UPDATED = "grocery.store_updated"
STORE_REMOVED = "grocery.store_removed"

ALL_EVENTS = (
	ITEM_ADDED, ITEM_UPDATED, ITEM_REMOVED, ITEMS_CLEARED,
	STORE_ADDED, STORE_UPDATED, STORE_REMOVED,
)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'ALL_EVENTS',
	'ITEM_ADDED', 'ITEM_UPDATED', 'ITEM_REMOVED', 'ITEMS_CLEARED',
	'STORE_ADDED', 'STORE_UPDATED', 'STORE_REMOVED',
]
