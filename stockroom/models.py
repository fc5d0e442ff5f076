from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING

from stockroom.core.document import Document
from stockroom.fields.indexed import Indexed, IndexSpec
from stockroom.plugins.timestamps import TimestampsMixin

ItemStatus = Literal["active", "inactive", "archived"]


class Item(TimestampsMixin, Document):
    """A stocked item. Listed newest-first unless another sort is requested."""

    name: str = Indexed(min_length=1)
    description: Optional[str] = None
    category: str = Indexed(min_length=1)
    price: float = Indexed(ge=0)
    stock: int = Field(default=0, ge=0)
    status: ItemStatus = Indexed("active")

    @field_validator("name", "category", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    class Settings:
        collection = "items"
        indexes = [
            IndexSpec(fields="created_at"),
            IndexSpec(fields=[("category", ASCENDING), ("created_at", DESCENDING)]),
            IndexSpec(fields=[("price", ASCENDING), ("created_at", DESCENDING)]),
            IndexSpec(fields=[("status", ASCENDING), ("created_at", DESCENDING)]),
        ]
