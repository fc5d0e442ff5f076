"""Sortable attributes and directions accepted by list queries."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pymongo import ASCENDING, DESCENDING

from stockroom.utils.exceptions import InvalidRequest

TIEBREAK_FIELD = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def direction(self) -> int:
        """pymongo sort direction."""
        return ASCENDING if self is SortOrder.ASC else DESCENDING

    @property
    def operator(self) -> str:
        """Comparison that selects rows strictly past a cursor position."""
        return "$gt" if self is SortOrder.ASC else "$lt"

    @classmethod
    def parse(cls, value: str | SortOrder) -> SortOrder:
        try:
            return cls(value)
        except ValueError:
            raise InvalidRequest(
                f"Invalid sortOrder '{value}'. Expected 'asc' or 'desc'"
            ) from None


class SortField(str, Enum):
    """Closed set of attributes a list query may be ordered by.

    Values are the public API names; ``field`` is the MongoDB field name.
    """

    CREATED_AT = "createdAt"
    PRICE = "price"
    NAME = "name"
    CATEGORY = "category"
    STATUS = "status"
    STOCK = "stock"

    @property
    def field(self) -> str:
        return _STORAGE_FIELDS[self]

    @property
    def value_types(self) -> tuple[type, ...]:
        """Python types a cursor value for this field may hold."""
        return _VALUE_TYPES[self]

    @property
    def is_tiebreaker(self) -> bool:
        return self.field == TIEBREAK_FIELD

    @classmethod
    def parse(cls, value: str | SortField) -> SortField:
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise InvalidRequest(
                f"Invalid sortBy '{value}'. Expected one of: {allowed}"
            ) from None


_STORAGE_FIELDS: dict[SortField, str] = {
    SortField.CREATED_AT: TIEBREAK_FIELD,
    SortField.PRICE: "price",
    SortField.NAME: "name",
    SortField.CATEGORY: "category",
    SortField.STATUS: "status",
    SortField.STOCK: "stock",
}

_VALUE_TYPES: dict[SortField, tuple[type, ...]] = {
    SortField.CREATED_AT: (datetime,),
    SortField.PRICE: (int, float),
    SortField.NAME: (str,),
    SortField.CATEGORY: (str,),
    SortField.STATUS: (str,),
    SortField.STOCK: (int,),
}
