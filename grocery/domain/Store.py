"""Store domain entity: a destination group for grocery items."""
from typing import Optional
from uuid import uuid4


class Store:
    def __init__(self, name: str = "", color: Optional[str] = None, id: Optional[str] = None):
        self.id = id or uuid4().hex
        self.name = name
        self.color = color or None

    def __str__(self) -> str:
        return f"Store {self.name}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Store(name=d.get("name", ""), color=d.get("color"), id=d.get("id"))

    def to_dict(self):
        return {"id": self.id, "name": self.name, "color": self.color}
