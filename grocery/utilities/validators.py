"""
Input schemas using Pydantic: option structs for the list operations and API request bodies.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from grocery.utilities.constants import UNASSIGNED


def _strip_or_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class AddOptions(BaseModel):
    """Options for adding an item.

    store_id: destination store; None adds to Unassigned.
    quantity: free-text quantity; None leaves it empty.
    category: category tag; unknown values become "Other".
    organic_required: defaults to False.
    """
    store_id: Optional[str] = None
    quantity: Optional[str] = None
    category: Optional[str] = None
    organic_required: bool = False

    @field_validator('store_id', 'quantity', 'category')
    @classmethod
    def blank_to_none(cls, v):
        return _strip_or_none(v)


class MoveOptions(BaseModel):
    """Options for moving an item.

    store_id: omitted keeps the current bucket; an explicit None or "unassigned"
    moves to Unassigned; any other value moves to that store.
    before_id: the anchor item; None (default) means end of the unchecked sub-list.
    """
    store_id: Optional[str] = None
    before_id: Optional[str] = None

    @model_validator(mode='after')
    def explicit_null_is_unassigned(self):
        if 'store_id' in self.model_fields_set and self.store_id is None:
            self.store_id = UNASSIGNED
        return self

    @property
    def keeps_bucket(self) -> bool:
        return self.store_id is None


class ItemUpdate(BaseModel):
    """Field updates for an item; only fields that are set are applied."""
    name: Optional[str] = Field(default=None, max_length=200)
    quantity: Optional[str] = None
    organic_required: Optional[bool] = None
    category: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Item name cannot be empty')
        return v

    @field_validator('quantity')
    @classmethod
    def strip_quantity(cls, v):
        return v.strip() if isinstance(v, str) else v


class EntryInput(BaseModel):
    """Schema for a raw text entry typed into the list."""
    text: str = Field(..., max_length=300)
    store_id: Optional[str] = None

    @field_validator('store_id')
    @classmethod
    def blank_store(cls, v):
        return _strip_or_none(v)


class ResolveInput(BaseModel):
    """Schema for answering a duplicate prompt."""
    name: str = Field(..., min_length=1, max_length=200)
    quantity: Optional[str] = None
    store_id: Optional[str] = None
    existing_id: str = Field(..., min_length=1)
    resolution: str = Field(..., pattern=r'^(merge|add_anyway|cancel)$')


class MergeInput(BaseModel):
    quantity: Optional[str] = None


class NameInput(BaseModel):
    """Schema for any body that carries a single name (stores, re-add, remove-by-name)."""
    name: str = Field(..., min_length=1, max_length=200)

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Name cannot be empty')
        return v


class StoreInput(NameInput):
    color: Optional[str] = Field(default=None, pattern=r'^#[0-9A-Fa-f]{6}$')


class StoreUpdateInput(BaseModel):
    """Store changes; a given name must be non-blank, a null color clears it."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    color: Optional[str] = Field(default=None, pattern=r'^#[0-9A-Fa-f]{6}$')

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        # Only runs for a name that was sent, so an explicit null is rejected here
        v = (v or '').strip()
        if not v:
            raise ValueError('Store name cannot be empty')
        return v
