import json
import tempfile
import unittest
from pathlib import Path
from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.Store import Store
from grocery.events.Event_Bus import EventBus, ITEM_ADDED, ITEM_UPDATED, ITEMS_CLEARED, STORE_REMOVED
from grocery.infra.Grocery_Repository import GroceryRepository, NotFoundError


class TestGroceryRepository(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "grocery.json"
        self.bus = EventBus()
        self.events = []
        for name in (ITEM_ADDED, ITEM_UPDATED, ITEMS_CLEARED, STORE_REMOVED):
            self.bus.subscribe(name, lambda n, p: self.events.append((n, p)))
        self.repo = GroceryRepository(self.path, bus=self.bus)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_is_empty_list(self):
        self.assertEqual(self.repo.list_items(), [])
        self.assertEqual(self.repo.list_stores(), [])

    def test_insert_persists_document(self):
        store = self.repo.insert_store(Store("Costco"))
        item = self.repo.insert_item(GroceryItem("Milk", "2 gallons", "Dairy", store_id=store.id, rank="i"))
        with open(self.path, encoding="utf-8") as f:
            doc = json.load(f)
        self.assertEqual(doc["stores"][0]["name"], "Costco")
        self.assertEqual(doc["items"][0]["id"], item.id)
        loaded = GroceryRepository(self.path, bus=EventBus()).get_item(item.id)
        self.assertEqual((loaded.name, loaded.quantity, loaded.category), ("Milk", "2 gallons", "Dairy"))

    def test_store_order_is_insertion_order(self):
        for name in ("Meijer", "Costco", "Aldi"):
            self.repo.insert_store(Store(name))
        self.assertEqual([s.name for s in self.repo.list_stores()], ["Meijer", "Costco", "Aldi"])

    def test_patch_writes_only_given_fields(self):
        item = self.repo.insert_item(GroceryItem("Milk", "1", rank="i"))
        patched = self.repo.patch_item(item.id, {"is_checked": True})
        self.assertTrue(patched.is_checked)
        self.assertEqual((patched.name, patched.quantity, patched.rank), ("Milk", "1", "i"))
        name, payload = self.events[-1]
        self.assertEqual(name, ITEM_UPDATED)
        self.assertEqual(payload["fields"], ["is_checked"])

    def test_patch_normalizes_category(self):
        item = self.repo.insert_item(GroceryItem("Milk"))
        self.assertEqual(self.repo.patch_item(item.id, {"category": "Snacks"}).category, "Other")

    def test_patch_rejects_unknown_fields_and_ids(self):
        item = self.repo.insert_item(GroceryItem("Milk"))
        with self.assertRaises(ValueError) as ctx:
            self.repo.patch_item(item.id, {"id": "other"})
        self.assertNotIsInstance(ctx.exception, NotFoundError)
        with self.assertRaises(NotFoundError):
            self.repo.patch_item("nope", {"name": "x"})
        with self.assertRaises(NotFoundError):
            self.repo.delete_item("nope")

    def test_delete_store_leaves_items_dangling(self):
        store = self.repo.insert_store(Store("Costco"))
        item = self.repo.insert_item(GroceryItem("Milk", store_id=store.id))
        self.repo.delete_store(store.id)
        self.assertEqual(self.repo.get_item(item.id).store_id, store.id)
        self.assertEqual(self.repo.list_stores(), [])
        self.assertEqual(self.events[-1], (STORE_REMOVED, {"store_id": store.id}))

    def test_delete_items_with_backup(self):
        keep = self.repo.insert_item(GroceryItem("Milk"))
        gone = self.repo.insert_item(GroceryItem("Eggs", is_checked=True))
        removed = self.repo.delete_items([gone.id, "unknown"], backup=True)
        self.assertEqual([i.name for i in removed], ["Eggs"])
        self.assertEqual([i.id for i in self.repo.list_items()], [keep.id])
        self.assertEqual(len(self.repo.backups.list_backups()), 1)
        name, payload = self.events[-1]
        self.assertEqual(name, ITEMS_CLEARED)
        self.assertEqual(payload, {"item_ids": [gone.id], "count": 1})

    def test_delete_nothing(self):
        self.assertEqual(self.repo.delete_items([]), [])
        self.assertFalse(self.path.exists())

    def test_events_after_insert(self):
        item = self.repo.insert_item(GroceryItem("Milk"))
        self.assertEqual(self.events[0][0], ITEM_ADDED)
        self.assertIs(self.events[0][1]["item"], item)

    def test_corrupt_file_reads_as_empty(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("grocery.infra.Grocery_Repository", level="ERROR"):
            self.assertEqual(self.repo.list_items(), [])

    def test_unknown_keys_ignored(self):
        self.path.write_text(json.dumps({"items": [{"id": "x", "name": "Milk", "sortOrder": 3}]}), encoding="utf-8")
        item = self.repo.get_item("x")
        self.assertEqual(item.name, "Milk")
        self.assertIsNone(item.rank)
