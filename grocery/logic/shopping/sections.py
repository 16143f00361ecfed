"""Per-store sections of the list.

One section per store in the order the stores were given (empty ones too),
then exactly one Unassigned section. Inside a section unchecked items come
first, then checked items, each in rank order.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Sequence

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.Store import Store
from grocery.logic.shopping.ordering import bucket_of, sort_by_rank
from grocery.utilities.constants import UNASSIGNED, UNASSIGNED_LABEL

__all__ = ["Section", "build_sections", "sections_to_dict"]


class Section:
    def __init__(self, store_id: Optional[str], name: str,
                 unchecked: List[GroceryItem], checked: List[GroceryItem]):
        self.store_id = store_id
        self.name = name
        self.unchecked = unchecked
        self.checked = checked

    @property
    def key(self) -> str:
        return self.store_id or UNASSIGNED

    @property
    def items(self) -> List[GroceryItem]:
        return self.unchecked + self.checked

    def __len__(self) -> int:
        return len(self.unchecked) + len(self.checked)

    def __repr__(self) -> str:
        return f"Section({self.name}: {len(self.unchecked)} open, {len(self.checked)} done)"

    def to_dict(self):
        return {
            "store_id": self.store_id,
            "key": self.key,
            "name": self.name,
            "count": len(self),
            "unchecked_count": len(self.unchecked),
            "items": [i.to_dict() for i in self.items],
        }


def build_sections(items: Sequence[GroceryItem], stores: Sequence[Store]) -> List[Section]:
    store_ids = {s.id for s in stores}
    buckets: Dict[Optional[str], List[GroceryItem]] = {s.id: [] for s in stores}
    buckets[None] = []
    for item in items:
        buckets[bucket_of(item, store_ids)].append(item)

    def _section(store_id: Optional[str], name: str) -> Section:
        ordered = sort_by_rank(buckets[store_id])
        return Section(
            store_id, name,
            [i for i in ordered if not i.is_checked],
            [i for i in ordered if i.is_checked],
        )

    sections = [_section(s.id, s.name) for s in stores]
    sections.append(_section(None, UNASSIGNED_LABEL))
    return sections


def sections_to_dict(sections: Sequence[Section]):
    return {
        "sections": [s.to_dict() for s in sections],
        "count": sum(len(s) for s in sections),
    }
