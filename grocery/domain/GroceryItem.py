"""GroceryItem domain entity: name, free-text quantity, category, check state, store and order key."""
from typing import List, Optional
from uuid import uuid4

from grocery.utilities.constants import CATEGORIES, DEFAULT_CATEGORY


def to_category(value: Optional[str]) -> str:
    '''Returns value if it is a known category, otherwise the default one.'''
    return value if value in CATEGORIES else DEFAULT_CATEGORY


class MealSource:
    '''Read-only note of a planned meal that asked for an item.'''

    def __init__(self, meal_id: str = "", meal_name: str = "", date: str = ""):
        self.meal_id = meal_id
        self.meal_name = meal_name
        self.date = date

    def __eq__(self, other) -> bool:
        if not isinstance(other, MealSource):
            return NotImplemented
        return (self.meal_id, self.meal_name, self.date) == (other.meal_id, other.meal_name, other.date)

    def __repr__(self) -> str:
        return f"MealSource({self.meal_name} on {self.date})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return MealSource(str(d.get("meal_id", "")), str(d.get("meal_name", "")), str(d.get("date", "")))

    def to_dict(self):
        return {"meal_id": self.meal_id, "meal_name": self.meal_name, "date": self.date}


class GroceryItem:
    def __init__(self, name: str = "", quantity: Optional[str] = None, category: str = DEFAULT_CATEGORY,
                 is_checked: bool = False, organic_required: bool = False, store_id: Optional[str] = None,
                 rank: Optional[str] = None, meal_sources: Optional[List[MealSource]] = None,
                 id: Optional[str] = None):
        self.id = id or uuid4().hex
        self.name = name
        self.quantity = quantity or None
        self.category = to_category(category)
        self.is_checked = bool(is_checked)
        self.organic_required = bool(organic_required)
        # None means the Unassigned bucket
        self.store_id = store_id or None
        self.rank = rank or None
        self.meal_sources = meal_sources[:] if meal_sources else []

    def __str__(self) -> str:
        parts = [self.name]
        if self.quantity:
            parts.append(self.quantity)
        if self.is_checked:
            parts.append("checked")
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a GroceryItem from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "name", "quantity", "category", "is_checked", "organic_required",
                   "store_id", "rank", "meal_sources"}
        filtered = {k: v for k, v in d.items() if k in allowed}
        filtered["meal_sources"] = [MealSource.from_dict(m) for m in filtered.get("meal_sources") or []]
        filtered.setdefault("name", "")
        return GroceryItem(**filtered)

    def to_dict(self):
        '''Converts the GroceryItem to a dictionary for JSON persistence.'''
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
            "is_checked": self.is_checked,
            "organic_required": self.organic_required,
            "store_id": self.store_id,
            "rank": self.rank,
            "meal_sources": [m.to_dict() for m in self.meal_sources],
        }
