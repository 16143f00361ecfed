"""Manual ordering of items inside a store bucket.

Order is carried by a per-item rank key: a string over RANK_DIGITS read as a
fraction in (0, 1). A move computes one key strictly between its new
neighbours, so it writes exactly one item and never renumbers the rest. Keys
never end in the zero digit, which guarantees there is always room between
two keys.

Items without a rank (legacy records) sort after every ranked item and keep
their stored order among themselves.

Everything here is pure: functions take the live collection and return the
values a caller should write.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.Store import Store
from grocery.utilities.constants import RANK_DIGITS, UNASSIGNED
from grocery.utilities.validators import MoveOptions

__all__ = [
    "rank_between", "sort_by_rank", "bucket_of", "resolve_target_store", "bucket_items",
    "append_rank", "plan_move", "move_up_options", "move_down_options",
]

_ZERO = RANK_DIGITS[0]


# --- Rank keys ------------------------------------------------------------

def _midpoint(a: str, b: Optional[str]) -> str:
    # a == "" stands for 0, b is None stands for 1
    if b is not None:
        n = 0
        while (a[n] if n < len(a) else _ZERO) == b[n]:
            n += 1
        if n > 0:
            return b[:n] + _midpoint(a[n:], b[n:])
    digit_a = RANK_DIGITS.index(a[0]) if a else 0
    digit_b = RANK_DIGITS.index(b[0]) if b is not None else len(RANK_DIGITS)
    if digit_b - digit_a > 1:
        return RANK_DIGITS[(digit_a + digit_b + 1) // 2]
    if b is not None and len(b) > 1:
        return b[:1]
    return RANK_DIGITS[digit_a] + _midpoint(a[1:], None)


def _check_key(key: str):
    if not key or key.endswith(_ZERO) or any(ch not in RANK_DIGITS for ch in key):
        raise ValueError(f"Invalid rank key: {key!r}")


def rank_between(before: Optional[str], after: Optional[str]) -> str:
    """Return a key strictly between `before` and `after` (None means open end)."""
    if before is not None:
        _check_key(before)
    if after is not None:
        _check_key(after)
    if before is not None and after is not None and before >= after:
        raise ValueError(f"Rank {before!r} is not below {after!r}")
    return _midpoint(before or "", after)


# --- Buckets --------------------------------------------------------------

def sort_by_rank(items: Iterable[GroceryItem]) -> List[GroceryItem]:
    # sorted() is stable, so unranked items keep their stored order
    return sorted(items, key=lambda i: (i.rank is None, i.rank or ""))


def _store_ids(stores: Iterable[Store]) -> Set[str]:
    return {s.id for s in stores}


def bucket_of(item: GroceryItem, store_ids: Set[str]) -> Optional[str]:
    '''Store id the item is displayed under; a dangling store id means Unassigned (None).'''
    return item.store_id if item.store_id in store_ids else None


def resolve_target_store(store_id: Optional[str], store_ids: Set[str]) -> Optional[str]:
    if not store_id or store_id == UNASSIGNED or store_id not in store_ids:
        return None
    return store_id


def bucket_items(items: Iterable[GroceryItem], bucket: Optional[str], store_ids: Set[str],
                 *, checked: bool = False, exclude_id: Optional[str] = None) -> List[GroceryItem]:
    """Checked or unchecked sub-list of one bucket, in rank order."""
    return sort_by_rank(
        i for i in items
        if bucket_of(i, store_ids) == bucket and i.is_checked == checked and i.id != exclude_id
    )


def _last_rank(sub_list: Sequence[GroceryItem]) -> Optional[str]:
    ranked = [i.rank for i in sub_list if i.rank]
    return max(ranked) if ranked else None


def append_rank(items: Iterable[GroceryItem], bucket: Optional[str], stores: Iterable[Store],
                *, checked: bool = False, exclude_id: Optional[str] = None) -> str:
    """Key that puts an item at the end of a bucket's checked or unchecked sub-list."""
    sub_list = bucket_items(items, bucket, _store_ids(stores), checked=checked, exclude_id=exclude_id)
    return rank_between(_last_rank(sub_list), None)


# --- Moves ----------------------------------------------------------------

def plan_move(items: Sequence[GroceryItem], stores: Sequence[Store], item: GroceryItem,
              options: MoveOptions) -> Tuple[Optional[str], Optional[str]]:
    """Return (store_id, rank) the moved item should be written with.

    The bucket changes first, then the item is placed right before
    `options.before_id` in the destination's unchecked sub-list. A missing,
    checked, foreign or self anchor puts it at the end.

    Checked items are never positioned. They keep their rank inside their
    bucket and go to the end of the destination's checked sub-list when the
    bucket changes.

    An unranked anchor cannot have a key placed right before it without
    ranking its unranked neighbours too, so the item goes right after the
    last ranked sibling, ahead of every unranked one.
    """
    store_ids = _store_ids(stores)
    current = bucket_of(item, store_ids)
    if options.keeps_bucket:
        target = current
    else:
        target = resolve_target_store(options.store_id, store_ids)

    if item.is_checked:
        if target == current:
            return target, item.rank
        return target, append_rank(items, target, stores, checked=True, exclude_id=item.id)

    siblings = bucket_items(items, target, store_ids, exclude_id=item.id)
    index = next((n for n, s in enumerate(siblings) if s.id == options.before_id), None)
    if index is None:
        return target, rank_between(_last_rank(siblings), None)

    anchor = siblings[index]
    if not anchor.rank:
        # Lands before the whole unranked run, not just the anchor
        return target, rank_between(_last_rank(siblings[:index]), None)
    # Two clients appending at once can write equal keys; step below the whole tie
    lower = [s.rank for s in siblings[:index] if s.rank and s.rank < anchor.rank]
    return target, rank_between(max(lower) if lower else None, anchor.rank)


def _position(items: Sequence[GroceryItem], stores: Sequence[Store], item: GroceryItem):
    store_ids = _store_ids(stores)
    bucket = bucket_of(item, store_ids)
    siblings = bucket_items(items, bucket, store_ids)
    index = next(n for n, s in enumerate(siblings) if s.id == item.id)
    return bucket, siblings, index


def move_up_options(items: Sequence[GroceryItem], stores: Sequence[Store],
                    item: GroceryItem) -> Optional[MoveOptions]:
    """Anchor on the previous unchecked sibling; None when already first or checked."""
    if item.is_checked:
        return None
    bucket, siblings, index = _position(items, stores, item)
    if index == 0:
        return None
    return MoveOptions(store_id=bucket or UNASSIGNED, before_id=siblings[index - 1].id)


def move_down_options(items: Sequence[GroceryItem], stores: Sequence[Store],
                      item: GroceryItem) -> Optional[MoveOptions]:
    """Anchor on the sibling two places ahead, or the end; None when already last or checked."""
    if item.is_checked:
        return None
    bucket, siblings, index = _position(items, stores, item)
    if index >= len(siblings) - 1:
        return None
    after_next = siblings[index + 2].id if index + 2 < len(siblings) else None
    return MoveOptions(store_id=bucket or UNASSIGNED, before_id=after_next)
