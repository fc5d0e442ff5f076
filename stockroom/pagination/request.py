from __future__ import annotations

from dataclasses import dataclass, field

from stockroom.pagination.sorting import SortField, SortOrder

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class FilterSet:
    """Optional list filters. ``None`` means the filter is inactive."""

    category: str | None = None
    status: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None


@dataclass(frozen=True)
class PaginationRequest:
    """One list query: sort, page size, continuation token and filters.

    ``sort_by`` and ``sort_order`` may be given as raw strings; they are
    resolved when the request is paginated.
    """

    sort_by: SortField | str = SortField.CREATED_AT
    sort_order: SortOrder | str = SortOrder.DESC
    limit: int = DEFAULT_LIMIT
    cursor: str | None = None
    filters: FilterSet = field(default_factory=FilterSet)
