import operator
import os
import re

import pytest
import pytest_asyncio
from pymongo.errors import PyMongoError

from stockroom import connect, disconnect, disable_tracing, ping
from stockroom.core.connection import _databases

TEST_MONGO_URI = os.environ.get("STOCKROOM_TEST_MONGO_URI", "mongodb://localhost:27017/stockroom_test")


@pytest.fixture(autouse=True)
def reset_tracing():
    yield
    disable_tracing()


@pytest_asyncio.fixture
async def mongo_connection():
    """Connect to a test MongoDB, drop its collections afterwards.

    Skips the test when no server is reachable.
    """
    db = await connect(TEST_MONGO_URI, serverSelectionTimeoutMS=500)
    try:
        await ping()
    except PyMongoError as e:
        await disconnect()
        pytest.skip(f"MongoDB not reachable at {TEST_MONGO_URI}: {e}")
    yield db
    # Reconnect if the test disconnected (e.g., connection tests)
    if "default" not in _databases:
        db = await connect(TEST_MONGO_URI, serverSelectionTimeoutMS=500)
    for name in await db.list_collection_names():
        await db.drop_collection(name)
    await disconnect()


# --- In-memory page source ---

_COMPARISONS = {
    "$lt": operator.lt,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$gte": operator.ge,
}


def _matches(doc, spec):
    for key, cond in spec.items():
        if key == "$and":
            if not all(_matches(doc, clause) for clause in cond):
                return False
        elif key == "$or":
            if not any(_matches(doc, clause) for clause in cond):
                return False
        elif isinstance(cond, dict) and cond and all(op.startswith("$") for op in cond):
            value = getattr(doc, key, None)
            for op, operand in cond.items():
                if op == "$options":
                    continue
                if value is None:
                    return False
                if op == "$regex":
                    flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
                    if not re.search(operand, value, flags):
                        return False
                elif not _COMPARISONS[op](value, operand):
                    return False
        elif getattr(doc, key, None) != cond:
            return False
    return True


class InMemoryQuery:
    def __init__(self, source, filter, sort=(), limit=0):
        self._source = source
        self._filter = filter
        self._sort = list(sort)
        self._limit = limit

    def sort(self, *fields):
        return InMemoryQuery(self._source, self._filter, fields, self._limit)

    def limit(self, n):
        self._source.limits.append(n)
        return InMemoryQuery(self._source, self._filter, self._sort, n)

    async def all(self):
        if self._source.error is not None:
            raise self._source.error
        rows = [doc for doc in self._source.items if _matches(doc, self._filter)]
        for field, direction in reversed(self._sort):
            rows.sort(key=lambda doc: getattr(doc, field), reverse=direction < 0)
        return rows[: self._limit] if self._limit else rows


class InMemoryCollection:
    """Evaluates the MongoDB filter subset the paginator emits, over model instances."""

    def __init__(self, items=(), error=None):
        self.items = list(items)
        self.error = error
        self.filters = []
        self.limits = []

    def find(self, filter=None):
        self.filters.append(filter or {})
        return InMemoryQuery(self, filter or {})


@pytest.fixture
def memory_collection():
    return InMemoryCollection
