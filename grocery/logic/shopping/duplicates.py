"""Duplicate detection and quantity merge policies.

A candidate name is compared against the whole list (every store, checked
items included) with trimmed, case-insensitive exact equality. A match pauses
the add until the caller picks one Resolution.

Merge policies take (current, incoming) free-text quantities and return the
merged text. They never convert units.
"""
from __future__ import annotations
import logging
import re
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from grocery.domain.GroceryItem import GroceryItem

__all__ = [
    "DuplicateCheck", "PendingEntry", "Resolution", "check_duplicate", "normalize_name",
    "concat_merge", "numeric_merge", "MERGE_STRATEGIES", "get_merge_strategy",
]

logger = logging.getLogger(__name__)

MergeStrategy = Callable[[Optional[str], Optional[str]], Optional[str]]

_AMOUNT_RE = re.compile(r"^(\d+(?:\.\d+)?)(?:\s*(.*?))?$")


def normalize_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


class Resolution(str, Enum):
    MERGE = "merge"
    ADD_ANYWAY = "add_anyway"
    CANCEL = "cancel"


class DuplicateCheck:
    def __init__(self, exists: bool = False, item: Optional[GroceryItem] = None):
        self.exists = exists
        self.item = item

    def __bool__(self) -> bool:
        return self.exists

    def to_dict(self):
        return {"exists": self.exists, "item": self.item.to_dict() if self.item else None}


class PendingEntry:
    '''An add that hit a duplicate and waits for a Resolution.'''

    def __init__(self, name: str, quantity: Optional[str], store_id: Optional[str], existing: GroceryItem):
        self.name = name
        self.quantity = quantity
        self.store_id = store_id
        self.existing = existing

    def to_dict(self):
        return {
            "name": self.name,
            "quantity": self.quantity,
            "store_id": self.store_id,
            "existing": self.existing.to_dict(),
        }


def check_duplicate(name: str, items: Iterable[GroceryItem]) -> DuplicateCheck:
    """Return the first item whose name equals `name` ignoring case and outer whitespace."""
    key = normalize_name(name)
    if not key:
        return DuplicateCheck()
    for item in items:
        if normalize_name(item.name) == key:
            return DuplicateCheck(True, item)
    return DuplicateCheck()


def _is_trivial(quantity: Optional[str]) -> bool:
    # "1" is what an entry without a quantity displays as
    return not quantity or quantity.strip() in ("", "1")


def concat_merge(current: Optional[str], incoming: Optional[str]) -> Optional[str]:
    """Join both quantities with " + ", dropping empty or "1" sides."""
    if _is_trivial(incoming):
        return current
    if _is_trivial(current):
        return incoming.strip()
    return f"{current.strip()} + {incoming.strip()}"


def _split_amount(quantity: str):
    m = _AMOUNT_RE.match(quantity.strip())
    if not m:
        return None
    return float(m.group(1)), (m.group(2) or "").strip()


def _format_number(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text or "0"


def numeric_merge(current: Optional[str], incoming: Optional[str]) -> Optional[str]:
    """Add the numbers when both sides carry the same unit text, else fall back to concat_merge."""
    if current and incoming:
        left, right = _split_amount(current), _split_amount(incoming)
        if left and right and left[1].lower() == right[1].lower():
            total = _format_number(left[0] + right[0])
            return f"{total} {left[1]}".strip()
    return concat_merge(current, incoming)


MERGE_STRATEGIES: Dict[str, MergeStrategy] = {
    "concat": concat_merge,
    "numeric": numeric_merge,
}


def get_merge_strategy(name: Optional[str]) -> MergeStrategy:
    key = (name or "concat").strip().lower()
    strategy = MERGE_STRATEGIES.get(key)
    if strategy is None:
        logger.warning("Unknown merge strategy %r, using concat", name)
        return concat_merge
    return strategy
