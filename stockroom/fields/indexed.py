from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import Field as PydanticField
from pymongo import ASCENDING


@dataclass
class IndexSpec:
    """Class-level index declared in a Document's ``Settings.indexes``."""

    fields: str | list[tuple[str, int]]
    unique: bool = False
    name: str | None = None

    def to_pymongo(self) -> tuple[list[tuple[str, int]], dict[str, Any]]:
        """Convert to pymongo create_index arguments (keys, kwargs)."""
        if isinstance(self.fields, str):
            keys = [(self.fields, ASCENDING)]
        else:
            keys = list(self.fields)

        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True
        if self.name:
            kwargs["name"] = self.name
        return keys, kwargs


def Indexed(
    default: Any = ...,
    *,
    unique: bool = False,
    index_direction: int = ASCENDING,
    **kwargs: Any,
) -> Any:
    """Field wrapper that marks a field for single-field index creation.

    Usage: category: str = Indexed(min_length=1)
    """
    field_kwargs: dict[str, Any] = {**kwargs}
    if default is not ...:
        field_kwargs["default"] = default

    field_kwargs["json_schema_extra"] = {
        "_stockroom_index": True,
        "_index_unique": unique,
        "_index_direction": index_direction,
    }
    return PydanticField(**field_kwargs)
