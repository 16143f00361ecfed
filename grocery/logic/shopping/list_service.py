"""Grocery list operations.

Composes the entry parser, the duplicate check, the ordering rules and the
recall buffer over a GroceryRepository. The service holds no list state of
its own: every call reads the current collection, computes the single write
it needs and hands that write to the repository.

Unknown item or store ids raise NotFoundError, other bad input ValueError. Repository I/O errors (OSError)
propagate to the caller, which logs them and leaves its view untouched.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.Store import Store
from grocery.infra.Grocery_Repository import GroceryRepository, NotFoundError
from grocery.logic.shopping.duplicates import (
    DuplicateCheck, MergeStrategy, PendingEntry, Resolution,
    check_duplicate, get_merge_strategy, normalize_name,
)
from grocery.logic.shopping.item_parser import parse_item_input
from grocery.logic.shopping.ordering import (
    append_rank, bucket_of, move_down_options, move_up_options, plan_move, resolve_target_store,
)
from grocery.logic.shopping.recall import RecallBuffer
from grocery.logic.shopping.sections import Section, build_sections
from grocery.utilities.config import GROCERY_MERGE_STRATEGY
from grocery.utilities.constants import DEFAULT_STORES
from grocery.utilities.validators import AddOptions, ItemUpdate, MoveOptions

__all__ = ["EntryResult", "GroceryListService"]

logger = logging.getLogger(__name__)


class EntryResult:
    '''Outcome of a typed entry: "added", "ignored", "duplicate", "merged" or "cancelled".'''

    def __init__(self, status: str, item: Optional[GroceryItem] = None, pending: Optional[PendingEntry] = None):
        self.status = status
        self.item = item
        self.pending = pending

    def __repr__(self) -> str:
        return f"EntryResult({self.status}, {self.item!r})"

    def to_dict(self):
        return {
            "status": self.status,
            "item": self.item.to_dict() if self.item else None,
            "pending": self.pending.to_dict() if self.pending else None,
        }


class GroceryListService:
    def __init__(self, repository: Optional[GroceryRepository] = None, recall: Optional[RecallBuffer] = None,
                 merge_strategy: Optional[MergeStrategy] = None):
        self.repository = repository if repository is not None else GroceryRepository()
        self.recall = recall if recall is not None else RecallBuffer()
        self.merge_strategy = merge_strategy or get_merge_strategy(GROCERY_MERGE_STRATEGY)

    # --- Reads ------------------------------------------------------------
    def stores(self) -> List[Store]:
        return self.repository.list_stores()

    def items(self) -> List[GroceryItem]:
        return self.repository.list_items()

    def sections(self) -> List[Section]:
        return build_sections(self.items(), self.stores())

    def recent_items(self):
        return self.recall.offers()

    def _require_item(self, item_id: str) -> GroceryItem:
        item = self.repository.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Item '{item_id}' not found.")
        return item

    # --- Adding -----------------------------------------------------------
    def add_item(self, name: str, options: Optional[AddOptions] = None) -> Optional[GroceryItem]:
        """Insert an item at the end of its bucket. An empty name is ignored and returns None."""
        name = (name or "").strip()
        if not name:
            return None
        options = options or AddOptions()
        stores = self.stores()
        store_id = resolve_target_store(options.store_id, {s.id for s in stores})
        item = GroceryItem(
            name=name,
            quantity=options.quantity,
            category=options.category,
            organic_required=options.organic_required,
            store_id=store_id,
            rank=append_rank(self.items(), store_id, stores),
        )
        self.repository.insert_item(item)
        self.recall.forget(name)
        logger.info("Added %r to %s", item.name, store_id or "unassigned")
        return item

    def check_duplicate(self, name: str) -> DuplicateCheck:
        return check_duplicate(name, self.items())

    def submit_entry(self, text: str, store_id: Optional[str] = None) -> EntryResult:
        """Parse a typed entry and add it, unless the name is empty or already on the list."""
        parsed = parse_item_input(text)
        if parsed.is_empty:
            return EntryResult("ignored")
        found = self.check_duplicate(parsed.name)
        if found:
            return EntryResult("duplicate", pending=PendingEntry(parsed.name, parsed.quantity, store_id, found.item))
        item = self.add_item(parsed.name, AddOptions(store_id=store_id, quantity=parsed.quantity))
        return EntryResult("added", item=item)

    def resolve_duplicate(self, pending: PendingEntry, resolution: Resolution) -> EntryResult:
        resolution = Resolution(resolution)
        if resolution is Resolution.MERGE:
            return EntryResult("merged", item=self.merge_quantity(pending.existing.id, pending.quantity))
        if resolution is Resolution.ADD_ANYWAY:
            item = self.add_item(pending.name, AddOptions(store_id=pending.store_id, quantity=pending.quantity))
            return EntryResult("added", item=item)
        return EntryResult("cancelled")

    def merge_quantity(self, item_id: str, incoming_quantity: Optional[str]) -> GroceryItem:
        """Fold a new request into an existing item.

        A checked item is reopened at the end of its unchecked sub-list so the
        next clear_checked does not sweep the request away.
        """
        item = self._require_item(item_id)
        merged = self.merge_strategy(item.quantity, incoming_quantity)
        self.recall.forget(item.name)
        fields = {}
        if merged != item.quantity:
            fields["quantity"] = merged
        if item.is_checked:
            stores = self.stores()
            bucket = bucket_of(item, {s.id for s in stores})
            fields["is_checked"] = False
            fields["rank"] = append_rank(self.items(), bucket, stores, exclude_id=item.id)
        if not fields:
            return item
        logger.info("Merged quantity for %r: %r + %r -> %r", item.name, item.quantity, incoming_quantity, merged)
        return self.repository.patch_item(item_id, fields)

    def re_add(self, name: str) -> EntryResult:
        """Re-add a recently removed name through the same path as a typed entry."""
        return self.submit_entry(name)

    # --- Editing ----------------------------------------------------------
    def toggle_checked(self, item_id: str) -> GroceryItem:
        """Flip the check state; the item goes to the end of the sub-list it lands in."""
        item = self._require_item(item_id)
        stores = self.stores()
        checked = not item.is_checked
        bucket = bucket_of(item, {s.id for s in stores})
        rank = append_rank(self.items(), bucket, stores, checked=checked, exclude_id=item.id)
        return self.repository.patch_item(item_id, {"is_checked": checked, "rank": rank})

    def update_item(self, item_id: str, update: ItemUpdate) -> GroceryItem:
        fields = {
            k: v for k, v in update.model_dump(exclude_unset=True).items()
            if v is not None or k == "quantity"
        }
        if "quantity" in fields:
            fields["quantity"] = fields["quantity"] or None
        if not fields:
            return self._require_item(item_id)
        return self.repository.patch_item(item_id, fields)

    def delete_item(self, item_id: str) -> GroceryItem:
        item = self.repository.delete_item(item_id)
        self.recall.remember([item.name])
        logger.info("Deleted %r", item.name)
        return item

    def clear_checked(self) -> int:
        """Delete every checked item in every store; returns how many went."""
        checked = [i for i in self.items() if i.is_checked]
        removed = self.repository.delete_items([i.id for i in checked], backup=True)
        self.recall.remember(i.name for i in removed)
        logger.info("Cleared %d checked items", len(removed))
        return len(removed)

    def remove_by_name(self, name: str) -> int:
        """Delete unchecked items with this name, e.g. once it turns up in the pantry."""
        key = normalize_name(name)
        matches = [i.id for i in self.items() if not i.is_checked and normalize_name(i.name) == key]
        return len(self.repository.delete_items(matches))

    # --- Ordering ---------------------------------------------------------
    def move_item(self, item_id: str, options: MoveOptions) -> GroceryItem:
        """Move an item to a bucket and/or before an anchor; one write."""
        item = self._require_item(item_id)
        store_id, rank = plan_move(self.items(), self.stores(), item, options)
        fields = {"store_id": store_id}
        if rank != item.rank:
            fields["rank"] = rank
        return self.repository.patch_item(item_id, fields)

    def move_up(self, item_id: str) -> GroceryItem:
        item = self._require_item(item_id)
        options = move_up_options(self.items(), self.stores(), item)
        return self.move_item(item_id, options) if options else item

    def move_down(self, item_id: str) -> GroceryItem:
        item = self._require_item(item_id)
        options = move_down_options(self.items(), self.stores(), item)
        return self.move_item(item_id, options) if options else item

    # --- Stores -----------------------------------------------------------
    def add_store(self, name: str, color: Optional[str] = None) -> Store:
        name = (name or "").strip()
        if not name:
            raise ValueError("Store name cannot be empty")
        return self.repository.insert_store(Store(name=name, color=color))

    def rename_store(self, store_id: str, name: str) -> Store:
        name = (name or "").strip()
        if not name:
            raise ValueError("Store name cannot be empty")
        return self.repository.patch_store(store_id, {"name": name})

    def recolor_store(self, store_id: str, color: Optional[str]) -> Store:
        return self.repository.patch_store(store_id, {"color": color})

    def delete_store(self, store_id: str) -> Store:
        return self.repository.delete_store(store_id)

    def seed_default_stores(self) -> List[Store]:
        """Create the default stores when none exist yet; returns what was created."""
        if self.stores():
            return []
        return [self.add_store(s["name"], s["color"]) for s in DEFAULT_STORES]
