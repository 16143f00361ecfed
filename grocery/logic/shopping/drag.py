"""Drag-and-drop gesture state.

A DragSession lives for one gesture only. The presentation layer starts it,
reports what is under the pointer as a drop key, and on release asks it for
the move to send. Nothing is written until `drop` returns a MoveOptions, and a
cancelled or pointless gesture returns None.

Drop keys:
  "<bucket>"             the body of a section (append to its end)
  "<bucket>::<item_id>"  just before that item
where <bucket> is a store id or "unassigned".
"""
from __future__ import annotations
from typing import Optional, Sequence, Tuple

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.Store import Store
from grocery.logic.shopping.ordering import bucket_of
from grocery.utilities.constants import UNASSIGNED
from grocery.utilities.validators import MoveOptions

__all__ = ["DragSession", "drop_key", "parse_drop_key"]

_SEPARATOR = "::"


def drop_key(store_id: Optional[str], item_id: Optional[str] = None) -> str:
    bucket = store_id or UNASSIGNED
    return f"{bucket}{_SEPARATOR}{item_id}" if item_id else bucket


def parse_drop_key(key: str) -> Tuple[str, Optional[str]]:
    bucket, _, item_id = key.partition(_SEPARATOR)
    return bucket, item_id or None


class DragSession:
    def __init__(self):
        self.dragging_id: Optional[str] = None
        self.drop_target: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.dragging_id is not None

    def start(self, item_id: str) -> "DragSession":
        self.dragging_id = item_id
        self.drop_target = None
        return self

    def hover(self, key: Optional[str]) -> None:
        if self.active:
            self.drop_target = key

    def leave(self, key: str) -> None:
        '''Clears the target when the pointer leaves that section or one of its rows.'''
        if self.drop_target and (self.drop_target == key or self.drop_target.startswith(key + _SEPARATOR)):
            self.drop_target = None

    def is_target(self, key: str) -> bool:
        if not self.drop_target:
            return False
        return self.drop_target == key or self.drop_target.startswith(key + _SEPARATOR)

    def cancel(self) -> None:
        self.dragging_id = None
        self.drop_target = None

    def drop(self, items: Sequence[GroceryItem], stores: Sequence[Store]) -> Optional[MoveOptions]:
        """Move for the current target, or None when the gesture changes nothing. Always ends the session."""
        try:
            if not self.active or not self.drop_target:
                return None
            item = next((i for i in items if i.id == self.dragging_id), None)
            if item is None:
                return None
            bucket, before_id = parse_drop_key(self.drop_target)
            if before_id == item.id:
                return None
            if before_id is None:
                current = bucket_of(item, {s.id for s in stores}) or UNASSIGNED
                if current == bucket:
                    return None
            return MoveOptions(store_id=bucket, before_id=before_id)
        finally:
            self.cancel()
