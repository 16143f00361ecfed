"""Grocery repository: JSON document store for stores and items.

The whole list lives in one JSON document {"stores": [...], "items": [...]}.
Each call is one committed write of one item or one store (a sweep deletes a
set of items at once); the file is replaced atomically, so a failed write
leaves the previous state intact. Stores keep the order they were added in,
which is the order the list shows them in.

After a write commits, a change event goes out on the event bus.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional

from grocery.domain.GroceryItem import GroceryItem, to_category
from grocery.domain.Store import Store
from grocery.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from grocery.events import event_helpers
from grocery.infra.paths import BACKUP_DIR, GROCERY_DATA_FILE
from grocery.utilities.backup import BackupManager

logger = logging.getLogger(__name__)

ITEM_FIELDS = {"name", "quantity", "category", "is_checked", "organic_required", "store_id", "rank"}
STORE_FIELDS = {"name", "color"}


class NotFoundError(ValueError):
    """Raised when an item or store id is not in the document."""


def _empty_document() -> Dict[str, list]:
    return {"stores": [], "items": []}


class GroceryRepository:
    def __init__(self, path: Optional[Path] = None, bus: Optional[EventBus] = None,
                 backups: Optional[BackupManager] = None):
        self.path = Path(path) if path else GROCERY_DATA_FILE
        self.bus = bus if bus is not None else GLOBAL_EVENT_BUS
        if backups is None:
            backups = BackupManager(self.path, BACKUP_DIR if path is None else None)
        self.backups = backups
        self._lock = RLock()

    # --- Document I/O -----------------------------------------------------
    def _load(self) -> Dict[str, list]:
        if not self.path.exists():
            return _empty_document()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                doc = json.load(f) or {}
        except json.JSONDecodeError:
            logger.error("Grocery data file %s is not valid JSON; starting from an empty list", self.path)
            return _empty_document()
        doc.setdefault("stores", [])
        doc.setdefault("items", [])
        return doc

    def _atomic_write(self, doc: Dict[str, list]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".grocery_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(doc, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(self.path))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def _index(records: List[Dict[str, Any]], record_id: str) -> int:
        for n, record in enumerate(records):
            if record.get("id") == record_id:
                return n
        return -1

    # --- Stores -----------------------------------------------------------
    def list_stores(self) -> List[Store]:
        with self._lock:
            return [Store.from_dict(s) for s in self._load()["stores"]]

    def get_store(self, store_id: str) -> Optional[Store]:
        return next((s for s in self.list_stores() if s.id == store_id), None)

    def insert_store(self, store: Store) -> Store:
        with self._lock:
            doc = self._load()
            doc["stores"].append(store.to_dict())
            self._atomic_write(doc)
        event_helpers.publish_store_added(store, bus=self.bus)
        return store

    def patch_store(self, store_id: str, fields: Dict[str, Any]) -> Store:
        unknown = set(fields) - STORE_FIELDS
        if unknown:
            raise ValueError(f"Unknown store fields: {sorted(unknown)}")
        with self._lock:
            doc = self._load()
            n = self._index(doc["stores"], store_id)
            if n < 0:
                raise NotFoundError(f"Store '{store_id}' not found.")
            doc["stores"][n].update(fields)
            self._atomic_write(doc)
            store = Store.from_dict(doc["stores"][n])
        event_helpers.publish_store_updated(store, bus=self.bus)
        return store

    def delete_store(self, store_id: str) -> Store:
        """Remove a store. Its items keep the dangling id and show as Unassigned."""
        with self._lock:
            doc = self._load()
            n = self._index(doc["stores"], store_id)
            if n < 0:
                raise NotFoundError(f"Store '{store_id}' not found.")
            store = Store.from_dict(doc["stores"].pop(n))
            self._atomic_write(doc)
        event_helpers.publish_store_removed(store_id, bus=self.bus)
        return store

    # --- Items ------------------------------------------------------------
    def list_items(self) -> List[GroceryItem]:
        with self._lock:
            return [GroceryItem.from_dict(i) for i in self._load()["items"]]

    def get_item(self, item_id: str) -> Optional[GroceryItem]:
        return next((i for i in self.list_items() if i.id == item_id), None)

    def insert_item(self, item: GroceryItem) -> GroceryItem:
        with self._lock:
            doc = self._load()
            doc["items"].append(item.to_dict())
            self._atomic_write(doc)
        event_helpers.publish_item_added(item, bus=self.bus)
        return item

    def patch_item(self, item_id: str, fields: Dict[str, Any]) -> GroceryItem:
        """Write only the given fields of one item (last write wins per field)."""
        unknown = set(fields) - ITEM_FIELDS
        if unknown:
            raise ValueError(f"Unknown item fields: {sorted(unknown)}")
        if "category" in fields:
            fields = dict(fields, category=to_category(fields["category"]))
        with self._lock:
            doc = self._load()
            n = self._index(doc["items"], item_id)
            if n < 0:
                raise NotFoundError(f"Item '{item_id}' not found.")
            doc["items"][n].update(fields)
            self._atomic_write(doc)
            item = GroceryItem.from_dict(doc["items"][n])
        event_helpers.publish_item_updated(item, fields.keys(), bus=self.bus)
        return item

    def delete_item(self, item_id: str) -> GroceryItem:
        with self._lock:
            doc = self._load()
            n = self._index(doc["items"], item_id)
            if n < 0:
                raise NotFoundError(f"Item '{item_id}' not found.")
            item = GroceryItem.from_dict(doc["items"].pop(n))
            self._atomic_write(doc)
        event_helpers.publish_item_removed(item.id, item.name, bus=self.bus)
        return item

    def delete_items(self, item_ids: Iterable[str], *, backup: bool = False) -> List[GroceryItem]:
        """Delete several items in one write; unknown ids are skipped."""
        wanted = set(item_ids)
        if not wanted:
            return []
        with self._lock:
            if backup:
                self.backups.create_backup()
            doc = self._load()
            removed = [GroceryItem.from_dict(i) for i in doc["items"] if i.get("id") in wanted]
            if not removed:
                return []
            doc["items"] = [i for i in doc["items"] if i.get("id") not in wanted]
            self._atomic_write(doc)
        event_helpers.publish_items_cleared([i.id for i in removed], bus=self.bus)
        return removed
