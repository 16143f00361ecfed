import unittest
from grocery.logic.shopping.recall import RecallBuffer


class TestRecallBuffer(unittest.TestCase):

    def test_newest_first(self):
        recall = RecallBuffer()
        recall.remember(["Milk", "Eggs"])
        recall.remember(["Bread"])
        self.assertEqual(recall.names(), ["Bread", "Milk", "Eggs"])

    def test_one_entry_per_name(self):
        recall = RecallBuffer()
        recall.remember(["Milk", "Eggs", "MILK"])
        recall.remember(["milk"])
        self.assertEqual(recall.names(), ["milk", "Eggs"])

    def test_capacity_and_offer_limit(self):
        recall = RecallBuffer(capacity=10, offer_limit=8)
        recall.remember(f"Item {n}" for n in range(12))
        self.assertEqual(len(recall), 10)
        self.assertEqual(len(recall.offers()), 8)
        self.assertEqual(recall.names()[0], "Item 0")

    def test_forget_is_case_insensitive(self):
        recall = RecallBuffer()
        recall.remember(["Milk", "Eggs"])
        recall.forget("  milk ")
        self.assertEqual(recall.names(), ["Eggs"])

    def test_blank_names_skipped(self):
        recall = RecallBuffer()
        recall.remember(["", "   "])
        self.assertEqual(len(recall), 0)

    def test_offers_carry_time(self):
        recall = RecallBuffer()
        recall.remember(["Milk"])
        offer = recall.offers()[0]
        self.assertEqual(offer["name"], "Milk")
        self.assertIn("cleared_at", offer)

    def test_clear(self):
        recall = RecallBuffer()
        recall.remember(["Milk"])
        recall.clear()
        self.assertEqual(recall.offers(), [])

    def test_sizes_must_be_positive(self):
        with self.assertRaises(ValueError):
            RecallBuffer(capacity=0)
