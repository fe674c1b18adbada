"""
End-to-end API tests.
Real routes, real ProductService, in-memory SQLite.
"""
import pytest
from datetime import datetime, timezone

from app.db.seed import seed_database


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestProductLifecycle:
    @pytest.mark.asyncio
    async def test_create_then_get(self, client, product_payload):
        before = datetime.now(timezone.utc)

        created = await client.post("/products", json=product_payload)

        assert created.status_code == 201
        body = created.json()
        location = created.headers["location"]
        assert location.endswith(f"/products/{body['id']}")

        fetched = await client.get(location)
        assert fetched.status_code == 200
        data = fetched.json()
        for key, value in product_payload.items():
            assert data[key] == value
        assert data["id"] == body["id"]
        assert parse_timestamp(data["createdAt"]) >= before
        assert parse_timestamp(data["createdAt"]).utcoffset().total_seconds() == 0

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_created_at(self, client, product_payload):
        created = (await client.post("/products", json=product_payload)).json()

        response = await client.put(
            f"/products/{created['id']}",
            json={**product_payload, "price": 899.5, "stock": 3, "createdAt": "2000-01-01T00:00:00Z"}
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == created["id"]
        assert updated["price"] == 899.5
        assert updated["stock"] == 3
        assert parse_timestamp(updated["createdAt"]) == parse_timestamp(created["createdAt"])

    @pytest.mark.asyncio
    async def test_update_missing_leaves_store_alone(self, client, product_payload):
        created = (await client.post("/products", json=product_payload)).json()

        response = await client.put(f"/products/{created['id'] + 1}", json={**product_payload, "name": "Ghost"})

        assert response.status_code == 404
        listing = (await client.get("/products")).json()
        assert listing["totalCount"] == 1
        assert listing["data"][0]["name"] == product_payload["name"]

    @pytest.mark.asyncio
    async def test_delete_twice(self, client, product_payload):
        created = (await client.post("/products", json=product_payload)).json()

        first = await client.delete(f"/products/{created['id']}")
        second = await client.delete(f"/products/{created['id']}")

        assert first.status_code == 204
        assert second.status_code == 404
        assert (await client.get(f"/products/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_create_stores_nothing(self, client, product_payload):
        response = await client.post("/products", json={**product_payload, "name": "x" * 201})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"
        assert (await client.get("/products")).json()["totalCount"] == 0


class TestListingSeededCatalog:
    @pytest.fixture(autouse=True)
    async def seeded(self, session_factory):
        await seed_database(session_factory)

    @pytest.mark.asyncio
    async def test_default_page(self, client):
        data = (await client.get("/products")).json()

        assert data["totalCount"] == 10
        assert data["pageSize"] == 10
        assert data["totalPages"] == 1
        assert data["data"][0]["name"] == "Cotton T-Shirt"
        assert data["data"][-1]["name"] == "iPhone 15 Pro"

    @pytest.mark.asyncio
    async def test_search_iphone(self, client):
        data = (await client.get("/products", params={"search": "iPhone"})).json()

        assert data["totalCount"] == 1
        assert [p["name"] for p in data["data"]] == ["iPhone 15 Pro"]

    @pytest.mark.asyncio
    async def test_category_one_per_page(self, client):
        data = (await client.get(
            "/products", params={"category": "Electronics", "page": 1, "limit": 1}
        )).json()

        assert data["totalCount"] == 3
        assert data["totalPages"] == 3
        assert data["hasNextPage"] is True
        assert data["hasPreviousPage"] is False
        assert [p["name"] for p in data["data"]] == ['MacBook Pro 14"']

    @pytest.mark.asyncio
    async def test_last_category_page(self, client):
        data = (await client.get(
            "/products", params={"category": "Electronics", "page": 3, "limit": 1}
        )).json()

        assert [p["name"] for p in data["data"]] == ["iPhone 15 Pro"]
        assert data["hasNextPage"] is False
        assert data["hasPreviousPage"] is True

    @pytest.mark.asyncio
    async def test_invalid_paging_behaves_as_defaults(self, client):
        normal = (await client.get("/products", params={"page": 1, "limit": 10})).json()
        odd = (await client.get("/products", params={"page": -2, "limit": 500})).json()

        assert odd == normal

    @pytest.mark.asyncio
    async def test_page_size_alias(self, client):
        data = (await client.get("/products", params={"page": 2, "pageSize": 4})).json()

        assert data["pageNumber"] == 2
        assert data["pageSize"] == 4
        assert data["totalPages"] == 3
        assert len(data["data"]) == 4

    @pytest.mark.asyncio
    async def test_huge_page_is_empty_not_an_error(self, client):
        response = await client.get("/products", params={"page": "99999999999999999999"})

        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["totalCount"] == 10
        assert data["pageNumber"] == 99999999999999999999
        assert data["hasNextPage"] is False
        assert data["hasPreviousPage"] is True


class TestOversizedValues:
    @pytest.mark.asyncio
    async def test_stock_beyond_column_range_rejected(self, client, product_payload):
        response = await client.post("/products", json={**product_payload, "stock": 10**20})

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["stock"]
        assert (await client.get("/products")).json()["totalCount"] == 0

    @pytest.mark.asyncio
    async def test_max_stock_accepted(self, client, product_payload):
        response = await client.post("/products", json={**product_payload, "stock": 2**31 - 1})

        assert response.status_code == 201
        assert response.json()["stock"] == 2**31 - 1
