"""API tests for catalog browsing and the service endpoints."""

from decimal import Decimal

import pytest

pytestmark = pytest.mark.api


class TestProductSearch:
    def test_lists_active_products(self, client):
        body = client.get("/api/products").json()

        ids = [p["id"] for p in body["products"]]
        assert body["total"] == 6
        assert "prod-007" not in ids
        assert body["limit"] == 20
        assert body["offset"] == 0

    def test_category_filter(self, client):
        body = client.get("/api/products", params={"category": "accessories"}).json()
        assert sorted(p["id"] for p in body["products"]) == ["prod-002", "prod-006"]

    def test_price_range(self, client):
        body = client.get("/api/products", params={"minPrice": "40", "maxPrice": "90"}).json()

        prices = [Decimal(str(p["price"])) for p in body["products"]]
        assert prices and all(Decimal("40") <= p <= Decimal("90") for p in prices)

    def test_featured_and_search(self, client):
        featured = client.get("/api/products", params={"featured": "true"}).json()
        assert sorted(p["id"] for p in featured["products"]) == ["prod-001", "prod-003"]

        found = client.get("/api/products", params={"search": "DENIM"}).json()
        assert [p["id"] for p in found["products"]] == ["prod-003"]

    def test_pagination(self, client):
        page = client.get("/api/products", params={"limit": 2, "offset": 2}).json()
        assert len(page["products"]) == 2
        assert page["total"] == 6

    def test_unknown_category_is_rejected(self, client):
        assert client.get("/api/products", params={"category": "hats"}).status_code == 422


class TestProductLookup:
    def test_get_by_id_uses_camel_case(self, client):
        product = client.get("/api/products/prod-003").json()

        assert product["slug"] == "relaxed-straight-jeans"
        assert Decimal(str(product["originalPrice"])) == Decimal("110.00")
        assert "imageUrl" in product

    def test_inactive_product_is_still_readable(self, client):
        response = client.get("/api/products/prod-007")
        assert response.status_code == 200
        assert response.json()["active"] is False

    def test_by_slug(self, client):
        assert client.get("/api/products/by-slug/ribbed-knit-beanie").json()["id"] == "prod-002"

    def test_not_found(self, client):
        assert client.get("/api/products/prod-999").status_code == 404
        assert client.get("/api/products/by-slug/nothing").status_code == 404

    def test_categories(self, client):
        assert client.get("/api/products/categories").json() == [
            "tops",
            "bottoms",
            "outerwear",
            "footwear",
            "accessories",
        ]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "storefront"}
