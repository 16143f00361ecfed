"""Recently removed item names, offered back for one-tap re-add.

Newest first, one entry per name (case-insensitive), capped at `capacity`.
Only the first `offer_limit` entries are offered. The buffer is in-memory and
per-process, like the event ring buffer the web observers keep.
"""
from __future__ import annotations
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Iterable, List

from grocery.logic.shopping.duplicates import normalize_name
from grocery.utilities.config import GROCERY_RECALL_CAPACITY, GROCERY_RECALL_OFFERS

__all__ = ["RecallBuffer"]


class RecallBuffer:
    def __init__(self, capacity: int = GROCERY_RECALL_CAPACITY, offer_limit: int = GROCERY_RECALL_OFFERS):
        if capacity < 1 or offer_limit < 1:
            raise ValueError("Recall buffer sizes must be positive")
        self.capacity = capacity
        self.offer_limit = offer_limit
        self._entries: List[Dict[str, Any]] = []
        self._lock = Lock()

    def remember(self, names: Iterable[str]) -> None:
        '''Pushes names to the front; the first name given ends up first.'''
        fresh: List[Dict[str, Any]] = []
        seen = set()
        cleared_at = datetime.now(timezone.utc).isoformat()
        for name in names:
            key = normalize_name(name)
            if not key or key in seen:
                continue
            seen.add(key)
            fresh.append({"name": name.strip(), "cleared_at": cleared_at})
        if not fresh:
            return
        with self._lock:
            kept = [e for e in self._entries if normalize_name(e["name"]) not in seen]
            self._entries = (fresh + kept)[: self.capacity]

    def forget(self, name: str) -> None:
        key = normalize_name(name)
        with self._lock:
            self._entries = [e for e in self._entries if normalize_name(e["name"]) != key]

    def offers(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(e) for e in self._entries[: self.offer_limit]]

    def names(self) -> List[str]:
        return [e["name"] for e in self.offers()]

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
