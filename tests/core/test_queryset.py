from pymongo import DESCENDING

from stockroom.core.queryset import QuerySet
from stockroom.models import Item
from stockroom.pagination import FilterSet, PaginationRequest


async def _seed():
    specs = [
        ("Hammer", "tools", 15.0),
        ("Saw", "tools", 25.0),
        ("Laptop", "electronics", 900.0),
        ("Lamp", "lighting", 25.0),
        ("Drill", "tools", 25.0),
    ]
    return [await Item.create(name=n, category=c, price=p) for n, c, p in specs]


class TestQuerySet:
    def test_find_returns_queryset(self):
        assert isinstance(Item.find(), QuerySet)

    def test_immutability(self):
        qs1 = Item.find(category="tools")
        qs2 = qs1.sort("-price")
        qs3 = qs2.limit(5)
        assert qs1 is not qs2 and qs2 is not qs3
        assert qs1._sort == []
        assert qs2._limit_count == 0
        assert qs3._limit_count == 5

    def test_sort_accepts_names_and_pairs(self):
        qs = Item.find().sort("-price", ("created_at", DESCENDING), "name")
        assert qs._sort == [("price", -1), ("created_at", -1), ("name", 1)]

    def test_find_ands_with_existing_filter(self):
        qs = Item.find({"$or": [{"a": 1}]}).find({"$or": [{"b": 1}]})
        assert qs._filter == {"$and": [{"$or": [{"a": 1}]}, {"$or": [{"b": 1}]}]}

    def test_find_without_filter_keeps_existing(self):
        assert Item.find(category="tools").find()._filter == {"category": "tools"}

    async def test_all_and_count(self, mongo_connection):
        await _seed()
        assert len(await Item.find().all()) == 5
        assert await Item.find(category="tools").count() == 3

    async def test_filter_chaining(self, mongo_connection):
        await _seed()
        results = await Item.find(category="tools").filter(price={"$gte": 20}).sort("name").all()
        assert [r.name for r in results] == ["Drill", "Saw"]

    async def test_first(self, mongo_connection):
        await _seed()
        item = await Item.find().sort("-price").first()
        assert item.name == "Laptop"
        assert await Item.find(category="garden").first() is None

    async def test_distinct(self, mongo_connection):
        await _seed()
        assert sorted(await Item.find().distinct("category")) == ["electronics", "lighting", "tools"]

    async def test_async_iteration(self, mongo_connection):
        await _seed()
        names = [item.name async for item in Item.find(category="tools").sort("name")]
        assert names == ["Drill", "Hammer", "Saw"]


class TestCursorPaginate:
    async def test_walks_ties_without_repeats(self, mongo_connection):
        items = await _seed()
        request = dict(sort_by="price", sort_order="desc", limit=2)
        seen, cursor = [], None
        while True:
            page = await Item.find().cursor_paginate(PaginationRequest(cursor=cursor, **request))
            seen.extend(i.id for i in page.items)
            if not page.has_more:
                break
            cursor = page.next_cursor
        expected = sorted(items, key=lambda i: (i.price, i.created_at), reverse=True)
        assert seen == [i.id for i in expected]

    async def test_queryset_filter_is_kept(self, mongo_connection):
        await _seed()
        page = await Item.find(category="tools").cursor_paginate(
            PaginationRequest(limit=10, filters=FilterSet(search="a"))
        )
        assert {i.name for i in page.items} == {"Hammer", "Saw"}

    async def test_search_and_cursor_compose(self, mongo_connection):
        await _seed()
        request = dict(sort_by="name", sort_order="asc", limit=1, filters=FilterSet(search="LA"))
        page1 = await Item.find().cursor_paginate(PaginationRequest(**request))
        page2 = await Item.find().cursor_paginate(PaginationRequest(cursor=page1.next_cursor, **request))
        assert [page1.items[0].name, page2.items[0].name] == ["Lamp", "Laptop"]
        assert page2.has_more is False
