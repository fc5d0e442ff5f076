from __future__ import annotations

from typing import Any, Generic, TYPE_CHECKING, TypeVar

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from stockroom.lifecycle.observability import track_query
from stockroom.utils.types import FilterSpec, SortSpec, and_filters, merge_filters

if TYPE_CHECKING:
    from stockroom.pagination.request import PaginationRequest
    from stockroom.utils.pagination import Page

T = TypeVar("T")


class QuerySet(Generic[T]):
    """Fluent, lazy, immutable query builder for MongoDB documents.

    Each chainable method returns a new QuerySet instance.
    Queries are only executed when a terminal method is called.
    """

    def __init__(
        self,
        document_class: type[T],
        filter: FilterSpec | None = None,
        sort: SortSpec | None = None,
        limit_count: int = 0,
    ) -> None:
        self._document_class = document_class
        self._filter: FilterSpec = filter or {}
        self._sort: SortSpec = sort or []
        self._limit_count = limit_count

    def _clone(self, **overrides: Any) -> QuerySet[T]:
        """Return a new QuerySet with merged overrides."""
        defaults = {
            "document_class": self._document_class,
            "filter": self._filter.copy(),
            "sort": self._sort.copy(),
            "limit_count": self._limit_count,
        }
        defaults.update(overrides)
        return QuerySet(**defaults)

    # --- Chainable methods ---

    def filter(self, _filter: FilterSpec | str | ObjectId | None = None, **kwargs: Any) -> QuerySet[T]:
        """Add filter conditions. Merges key-by-key with the existing filter.

        Examples:
            Item.find().filter("507f1f77bcf86cd799439011")
            Item.find(category="tools").filter({"status": "active"})
        """
        if isinstance(_filter, str):
            _filter = {"_id": ObjectId(_filter)}
        elif isinstance(_filter, ObjectId):
            _filter = {"_id": _filter}

        return self._clone(filter=merge_filters(self._filter, _filter, **kwargs))

    def find(self, filter: FilterSpec | None = None) -> QuerySet[T]:
        """Narrow this queryset with ``$and``.

        Unlike filter(), existing conditions on the same keys (including
        ``$or``) are kept, so operator-heavy predicates compose safely.
        """
        return self._clone(filter=and_filters(self._filter, filter or {}))

    def sort(self, *fields: str | tuple[str, int]) -> QuerySet[T]:
        """Set sort order.

        Accepts field names, prefixed with '-' for descending, or
        ``(field, direction)`` pairs as pymongo takes them.

        Example: .sort("-created_at", "name")
        """
        sort_spec: SortSpec = []
        for field in fields:
            if isinstance(field, tuple):
                sort_spec.append(field)
            elif field.startswith("-"):
                sort_spec.append((field[1:], DESCENDING))
            else:
                sort_spec.append((field, ASCENDING))
        return self._clone(sort=sort_spec)

    def limit(self, n: int) -> QuerySet[T]:
        return self._clone(limit_count=n)

    # --- Terminal methods ---

    async def all(self) -> list[T]:
        """Execute the query and return all matching documents."""
        async with track_query("find", self._document_class._collection_name, self._document_class.__name__, filter=self._filter) as ctx:
            results = []
            async for raw in self._build_cursor():
                results.append(self._document_class._from_mongo(raw))
            ctx["result_count"] = len(results)
        return results

    async def first(self) -> T | None:
        """Return the first matching document, or None."""
        results = await self.limit(1).all()
        return results[0] if results else None

    async def count(self) -> int:
        async with track_query("count", self._document_class._collection_name, self._document_class.__name__, filter=self._filter) as ctx:
            collection = self._document_class.get_collection()
            result = await collection.count_documents(self._filter)
            ctx["result_count"] = result
        return result

    async def distinct(self, field: str) -> list[Any]:
        """Return distinct values for a field."""
        async with track_query("distinct", self._document_class._collection_name, self._document_class.__name__, filter=self._filter) as ctx:
            collection = self._document_class.get_collection()
            values = await collection.distinct(field, self._filter)
            ctx["result_count"] = len(values)
        return values

    # --- Pagination ---

    async def cursor_paginate(self, request: PaginationRequest) -> Page[T]:
        """Keyset pagination over this queryset's matches.

        The queryset's own filter is ANDed with the page predicate; its sort
        and limit are replaced by the ones the request compiles to.
        """
        from stockroom.pagination import paginate

        return await paginate(self, request)

    # --- Async iteration ---

    async def __aiter__(self):
        async for raw in self._build_cursor():
            yield self._document_class._from_mongo(raw)

    # --- Internal ---

    def _build_cursor(self):
        """Compose a pymongo cursor from stored query parameters."""
        collection = self._document_class.get_collection()
        cursor = collection.find(self._filter)
        if self._sort:
            cursor = cursor.sort(self._sort)
        if self._limit_count:
            cursor = cursor.limit(self._limit_count)
        return cursor
