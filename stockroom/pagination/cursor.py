"""Opaque continuation tokens.

A token is the sort position of the last row of a page: a flat mapping of
MongoDB field name to value, serialized as canonical Extended JSON (sorted
keys, compact separators, datetimes and ObjectIds type-tagged) and wrapped in
unpadded URL-safe base64 so it can travel in a query string.

Example payload for ``sortBy=price``::

    {"created_at": {"$date": "2025-01-15T10:30:00Z"}, "price": 19.99}
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bson import json_util
from bson.errors import BSONError
from bson.json_util import JSONMode, JSONOptions

from stockroom.pagination.sorting import TIEBREAK_FIELD, SortField
from stockroom.utils.exceptions import InvalidCursor

_JSON_OPTIONS = JSONOptions(json_mode=JSONMode.RELAXED, tz_aware=False)

_DECODE_ERRORS = (ValueError, TypeError, KeyError, ArithmeticError, RecursionError, BSONError)


@dataclass(frozen=True)
class CursorPayload:
    """Sort position of the last row returned on a page."""

    values: dict[str, Any]

    @classmethod
    def from_item(cls, item: Any, sort_field: SortField) -> CursorPayload:
        """Capture ``item``'s position under ``sort_field`` plus its tiebreaker."""
        values = {TIEBREAK_FIELD: getattr(item, TIEBREAK_FIELD)}
        values[sort_field.field] = getattr(item, sort_field.field)
        return cls(values)

    def position(self, sort_field: SortField) -> tuple[Any, datetime]:
        """Return ``(sort value, created_at)`` for ``sort_field``.

        Raises:
            InvalidCursor: If the payload was issued for a different sort
                field or holds values of the wrong type.
        """
        expected = {sort_field.field, TIEBREAK_FIELD}
        if set(self.values) != expected:
            raise InvalidCursor(
                f"Cursor does not describe a position for sortBy '{sort_field.value}'"
            )

        created_at = self.values[TIEBREAK_FIELD]
        if not isinstance(created_at, datetime):
            raise InvalidCursor("Cursor tiebreaker is not a timestamp")

        value = self.values[sort_field.field]
        if isinstance(value, bool) or not isinstance(value, sort_field.value_types):
            raise InvalidCursor(
                f"Cursor value for '{sort_field.value}' has unexpected type {type(value).__name__}"
            )
        return value, created_at


def encode_cursor(payload: CursorPayload) -> str:
    text = json_util.dumps(
        payload.values,
        json_options=_JSON_OPTIONS,
        sort_keys=True,
        separators=(",", ":"),
    )
    token = base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")
    return token.rstrip("=")


def decode_cursor(token: str) -> CursorPayload:
    """Parse a token produced by :func:`encode_cursor`.

    Raises:
        InvalidCursor: For any token that is not exactly a well-formed payload.
    """
    if not isinstance(token, str) or not token:
        raise InvalidCursor("Cursor is empty")

    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        values = json_util.loads(raw.decode("utf-8"), json_options=_JSON_OPTIONS)
    except (binascii.Error, UnicodeError, *_DECODE_ERRORS) as exc:
        raise InvalidCursor(f"Malformed cursor: {exc}") from exc

    if not isinstance(values, dict) or not values:
        raise InvalidCursor("Cursor payload must be a non-empty object")
    if not all(isinstance(key, str) for key in values):
        raise InvalidCursor("Cursor payload keys must be strings")
    return CursorPayload(values)
