import logging

import pytest

from stockroom.lifecycle.observability import (
    QueryEvent,
    add_listener,
    clear_events,
    disable_tracing,
    emit_event,
    enable_tracing,
    get_events,
    track_query,
)
from stockroom.models import Item
from stockroom.pagination import PaginationRequest, paginate


class TestTrackQuery:
    async def test_disabled_by_default(self):
        async with track_query("find", "items") as ctx:
            ctx["result_count"] = 3
        assert get_events() == []

    async def test_captures_event_with_result_count(self):
        enable_tracing(capture_events=True)
        async with track_query("find", "items", "Item", filter={"category": "tools"}) as ctx:
            ctx["result_count"] = 3
        [event] = get_events()
        assert event.operation == "find"
        assert event.filter == {"category": "tools"}
        assert event.result_count == 3
        assert event.duration_ms >= 0
        assert event.failed is False

    async def test_failed_operation_is_flagged_and_reraised(self):
        enable_tracing(capture_events=True)
        with pytest.raises(RuntimeError):
            async with track_query("find", "items"):
                raise RuntimeError("boom")
        assert get_events()[0].failed is True

    def test_slow_query_logs_warning(self, caplog):
        enable_tracing(slow_query_ms=5.0)
        with caplog.at_level(logging.WARNING, logger="stockroom"):
            emit_event(QueryEvent(operation="find", collection="items", duration_ms=12.0))
        assert any("Slow query" in record.message for record in caplog.records)

    def test_listener_receives_events(self):
        received = []
        enable_tracing()
        add_listener(received.append)
        emit_event(QueryEvent(operation="count", collection="items"))
        assert [e.operation for e in received] == ["count"]

    def test_disable_clears_state(self):
        enable_tracing(capture_events=True)
        emit_event(QueryEvent(operation="find", collection="items"))
        disable_tracing()
        assert get_events() == []


class TestStorageEvents:
    async def test_page_query_is_traced(self, mongo_connection):
        await Item.create(name="Desk", category="furniture", price=100)
        enable_tracing(capture_events=True)
        clear_events()
        await paginate(Item, PaginationRequest(limit=5))
        find_events = [e for e in get_events() if e.operation == "find"]
        assert len(find_events) == 1
        assert find_events[0].result_count == 1
