import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from stockroom.api import create_access_token, create_app
from stockroom.config import Settings
from stockroom.models import Item

SETTINGS = Settings(jwt_secret="test-secret")


@pytest_asyncio.fixture
async def api(mongo_connection):
    app = create_app(SETTINGS)
    token = create_access_token("user-1", SETTINGS)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client


async def _create(api, **fields):
    body = {"name": "Desk", "category": "furniture", "price": 120.0, **fields}
    resp = await api.post("/api/items", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["item"]


class TestCreate:
    async def test_create_returns_item(self, api):
        resp = await api.post("/api/items", json={"name": "Desk", "category": "furniture", "price": 120})
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Item created successfully"
        item = body["data"]["item"]
        assert item["status"] == "active"
        assert item["stock"] == 0
        assert item["created_at"] is not None

    async def test_missing_fields_rejected(self, api):
        resp = await api.post("/api/items", json={"name": "Desk"})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    async def test_client_cannot_set_created_at(self, api):
        item = await _create(api, created_at="2000-01-01T00:00:00")
        assert not item["created_at"].startswith("2000")


class TestReadUpdateDelete:
    async def test_get_item(self, api):
        created = await _create(api)
        resp = await api.get(f"/api/items/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["data"]["item"]["name"] == "Desk"

    @pytest.mark.parametrize("item_id", [str(ObjectId()), "not-an-id"])
    async def test_missing_item_is_404(self, api, item_id):
        resp = await api.get(f"/api/items/{item_id}")
        assert resp.status_code == 404
        assert resp.json()["success"] is False

    async def test_update_item(self, api):
        created = await _create(api)
        resp = await api.put(f"/api/items/{created['id']}", json={"price": 99.0, "status": "archived"})
        assert resp.status_code == 200
        item = resp.json()["data"]["item"]
        assert resp.json()["message"] == "Item updated successfully"
        assert (item["price"], item["status"]) == (99.0, "archived")
        assert item["created_at"] == created["created_at"]
        stored = await Item.get(created["id"])
        assert stored.price == 99.0

    async def test_update_with_invalid_value_is_400(self, api):
        created = await _create(api)
        resp = await api.put(f"/api/items/{created['id']}", json={"name": None})
        assert resp.status_code == 400

    async def test_delete_item(self, api):
        created = await _create(api)
        resp = await api.delete(f"/api/items/{created['id']}")
        assert resp.json() == {"success": True, "message": "Item deleted successfully"}
        assert (await api.get(f"/api/items/{created['id']}")).status_code == 404

    async def test_categories(self, api):
        await _create(api, category="tools")
        await _create(api, category="furniture")
        await _create(api, category="tools")
        resp = await api.get("/api/items/categories")
        assert resp.json()["data"]["categories"] == ["furniture", "tools"]


class TestListAgainstMongo:
    async def test_pages_over_stored_items(self, api):
        for n in range(5):
            await _create(api, name=f"item {n}", price=float(n % 2))
        seen, cursor = [], None
        while True:
            params = {"limit": 2, "sortBy": "price", "sortOrder": "desc"}
            if cursor:
                params["cursor"] = cursor
            body = (await api.get("/api/items", params=params)).json()
            seen.extend(i["name"] for i in body["data"]["items"])
            cursor = body["data"]["pagination"]["nextCursor"]
            if cursor is None:
                break
        assert seen == ["item 3", "item 1", "item 4", "item 2", "item 0"]
