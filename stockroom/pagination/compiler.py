"""Translate a list request into a MongoDB filter document and sort spec."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from stockroom.pagination.cursor import CursorPayload
from stockroom.pagination.request import FilterSet
from stockroom.pagination.sorting import TIEBREAK_FIELD, SortField, SortOrder
from stockroom.utils.types import FilterSpec, SortSpec, and_filters

SEARCH_FIELDS = ("name", "description")


@dataclass(frozen=True)
class CompiledQuery:
    predicate: FilterSpec
    sort: SortSpec


def compile_filters(filters: FilterSet) -> list[FilterSpec]:
    """Build one clause per active filter; callers AND them together."""
    clauses: list[FilterSpec] = []

    if filters.category:
        clauses.append({"category": filters.category})
    if filters.status:
        clauses.append({"status": filters.status})

    price: dict[str, Any] = {}
    if filters.min_price is not None:
        price["$gte"] = filters.min_price
    if filters.max_price is not None:
        price["$lte"] = filters.max_price
    if price:
        clauses.append({"price": price})

    if filters.search:
        # Literal substring match, not a user-supplied regex
        pattern = re.escape(filters.search)
        clauses.append(
            {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]}
        )

    return clauses


def compile_sort(sort_field: SortField, sort_order: SortOrder) -> SortSpec:
    """Primary key plus the created_at tiebreaker, both in ``sort_order``.

    The tiebreaker shares the primary direction so the cursor predicate's
    comparison agrees with the order rows are returned in.
    """
    sort: SortSpec = [(sort_field.field, sort_order.direction)]
    if not sort_field.is_tiebreaker:
        sort.append((TIEBREAK_FIELD, sort_order.direction))
    return sort


def compile_cursor(cursor: CursorPayload, sort_field: SortField, sort_order: SortOrder) -> FilterSpec:
    """Select rows strictly after the cursor position in the compiled order.

    For a non-unique sort field the position is ``(value, created_at)``: rows
    past ``value`` come first, rows tied on ``value`` are resolved by
    ``created_at``.
    """
    value, created_at = cursor.position(sort_field)
    op = sort_order.operator

    if sort_field.is_tiebreaker:
        return {TIEBREAK_FIELD: {op: created_at}}

    return {
        "$or": [
            {sort_field.field: {op: value}},
            {sort_field.field: value, TIEBREAK_FIELD: {op: created_at}},
        ]
    }


def compile_query(
    filters: FilterSet,
    sort_field: SortField,
    sort_order: SortOrder,
    cursor: CursorPayload | None = None,
) -> CompiledQuery:
    clauses = compile_filters(filters)
    if cursor is not None:
        clauses.append(compile_cursor(cursor, sort_field, sort_order))
    return CompiledQuery(
        predicate=and_filters(*clauses),
        sort=compile_sort(sort_field, sort_order),
    )
