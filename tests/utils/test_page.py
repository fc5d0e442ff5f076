import dataclasses

import pytest

from stockroom.utils.pagination import Page
from stockroom.utils.types import and_filters, merge_filters


class TestPage:
    def test_count_is_derived_from_items(self):
        page = Page(items=["a", "b"], limit=5, has_more=False)
        assert page.count == 2
        assert page.next_cursor is None

    def test_page_is_immutable(self):
        page = Page(items=[], limit=5, has_more=False)
        with pytest.raises(dataclasses.FrozenInstanceError):
            page.has_more = True


class TestFilterHelpers:
    def test_merge_filters_precedence(self):
        merged = merge_filters({"a": 1, "b": 1}, {"b": 2}, c=3)
        assert merged == {"a": 1, "b": 2, "c": 3}

    def test_and_filters_drops_empty_clauses(self):
        assert and_filters({}, {"a": 1}, {}) == {"a": 1}

    def test_and_filters_nothing_left(self):
        assert and_filters({}, {}) == {}

    def test_and_filters_keeps_colliding_keys(self):
        left = {"$or": [{"a": 1}, {"b": 1}]}
        right = {"$or": [{"c": 1}, {"d": 1}]}
        assert and_filters(left, right) == {"$and": [left, right]}
