from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """Cursor-based pagination result.

    ``next_cursor`` is set iff ``has_more`` is true.
    """

    items: list[T]
    limit: int
    has_more: bool
    next_cursor: str | None = None

    @property
    def count(self) -> int:
        return len(self.items)
