from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

from pymongo.errors import PyMongoError

from stockroom.pagination.compiler import CompiledQuery
from stockroom.pagination.cursor import CursorPayload, encode_cursor
from stockroom.pagination.sorting import SortField
from stockroom.utils.exceptions import InvalidRequest, StorageError
from stockroom.utils.pagination import Page
from stockroom.utils.types import FilterSpec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageQuery(Protocol[T]):
    def sort(self, *fields: Any) -> PageQuery[T]: ...

    def limit(self, n: int) -> PageQuery[T]: ...

    async def all(self) -> list[T]: ...


class PageSource(Protocol[T]):
    """Anything with a lazy ``find(filter)``: a Document class or a QuerySet."""

    def find(self, filter: FilterSpec | None = None) -> PageQuery[T]: ...


def validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidRequest(f"limit must be a positive integer, got {limit!r}")
    return limit


async def fetch_page(
    source: PageSource[T],
    query: CompiledQuery,
    limit: int,
    sort_field: SortField,
) -> Page[T]:
    """Run the compiled query once and cut a page from it.

    Fetches ``limit + 1`` rows so the presence of a next page is known
    without a second round trip.
    """
    validate_limit(limit)

    try:
        rows = await source.find(query.predicate).sort(*query.sort).limit(limit + 1).all()
    except PyMongoError as exc:
        logger.error("Page query failed: %s", exc)
        raise StorageError(str(exc)) from exc

    has_more = len(rows) > limit
    items = rows[:limit]

    next_cursor = None
    if has_more:
        next_cursor = encode_cursor(CursorPayload.from_item(items[-1], sort_field))

    return Page(items=items, limit=limit, has_more=has_more, next_cursor=next_cursor)
