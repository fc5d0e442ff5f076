"""Keyset pagination over a MongoDB collection.

``paginate`` is the single entry point: it decodes the request's cursor,
compiles filters, sort and cursor into one query, and cuts a page from it.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from stockroom.pagination.assembler import PageQuery, PageSource, fetch_page, validate_limit
from stockroom.pagination.compiler import (
    SEARCH_FIELDS,
    CompiledQuery,
    compile_cursor,
    compile_filters,
    compile_query,
    compile_sort,
)
from stockroom.pagination.cursor import CursorPayload, decode_cursor, encode_cursor
from stockroom.pagination.request import DEFAULT_LIMIT, FilterSet, PaginationRequest
from stockroom.pagination.sorting import TIEBREAK_FIELD, SortField, SortOrder
from stockroom.utils.pagination import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def paginate(source: PageSource[T], request: PaginationRequest) -> Page[T]:
    """Return one page of ``source`` for ``request``.

    Raises:
        InvalidRequest: Non-positive limit or unknown sort field/order.
        InvalidCursor: The continuation token cannot be decoded or does not
            match the requested sort field.
        StorageError: The query failed to execute.
    """
    limit = validate_limit(request.limit)
    sort_field = SortField.parse(request.sort_by)
    sort_order = SortOrder.parse(request.sort_order)
    cursor = decode_cursor(request.cursor) if request.cursor is not None else None

    query = compile_query(request.filters, sort_field, sort_order, cursor)
    logger.debug(
        "Paginating by %s %s (limit=%d, cursor=%s): %s",
        sort_field.value,
        sort_order.value,
        limit,
        cursor is not None,
        query.predicate,
    )
    return await fetch_page(source, query, limit, sort_field)


__all__ = [
    "paginate",
    "fetch_page",
    "validate_limit",
    "PageQuery",
    "PageSource",
    "CompiledQuery",
    "compile_query",
    "compile_filters",
    "compile_sort",
    "compile_cursor",
    "SEARCH_FIELDS",
    "CursorPayload",
    "encode_cursor",
    "decode_cursor",
    "FilterSet",
    "PaginationRequest",
    "DEFAULT_LIMIT",
    "SortField",
    "SortOrder",
    "TIEBREAK_FIELD",
    "Page",
]
