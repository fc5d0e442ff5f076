from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import Field

_clock_lock = threading.Lock()
_last_issued: datetime | None = None


def next_timestamp() -> datetime:
    """Return a naive UTC timestamp, strictly later than any issued before.

    MongoDB stores datetimes at millisecond precision, so values are truncated
    to the millisecond and bumped by 1ms when the clock has not moved on.
    """
    global _last_issued
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    now = now.replace(microsecond=now.microsecond - now.microsecond % 1000)
    with _clock_lock:
        if _last_issued is not None and now <= _last_issued:
            now = _last_issued + timedelta(milliseconds=1)
        _last_issued = now
    return now


class TimestampsMixin:
    """Mixin that manages created_at and updated_at.

    created_at is assigned once on insert and never changes afterwards.

    Usage: class Item(TimestampsMixin, Document): ...
    """

    created_at: Optional[datetime] = Field(default=None)
    updated_at: Optional[datetime] = Field(default=None)

    async def insert(self) -> None:
        now = next_timestamp()
        object.__setattr__(self, "created_at", now)
        object.__setattr__(self, "updated_at", now)
        await super().insert()

    async def update(self, **kwargs: Any) -> None:
        if "created_at" in kwargs:
            raise ValueError("created_at is immutable")
        kwargs["updated_at"] = next_timestamp()
        await super().update(**kwargs)
