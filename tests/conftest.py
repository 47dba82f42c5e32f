from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.database import cart_db, order_db, product_db
from storefront.models.product import Product, ProductCategory
from storefront.security.identity import token_directory


def make_product(product_id, price, stock=100, active=True, name=None, **kwargs):
    """Helper: build a catalog product with sensible defaults."""
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        slug=product_id,
        price=Decimal(str(price)),
        category=kwargs.pop("category", ProductCategory.TOPS),
        stock=stock,
        active=active,
        **kwargs,
    )


@pytest.fixture(autouse=True)
def reset_stores():
    """Start and end every test with empty carts/orders and the seed catalog"""
    cart_db.reset()
    order_db.reset()
    product_db.reset()
    token_directory.reset()
    yield
    cart_db.reset()
    order_db.reset()
    product_db.reset()
    token_directory.reset()


@pytest.fixture()
def client():
    from storefront.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def shop_products():
    """Two products with round prices, registered in the shared catalog"""
    tee = product_db.upsert(make_product("prod-a", "30.00", name="Tee"))
    cap = product_db.upsert(make_product("prod-b", "20.00", name="Cap"))
    return tee, cap


@pytest.fixture()
def alice_headers():
    token_directory.register("tok-alice", "alice")
    return {"Authorization": "Bearer tok-alice"}


@pytest.fixture()
def guest_headers():
    return {"X-Session-Id": "sess-guest-1"}


@pytest.fixture()
def product_factory():
    return make_product
