"""
Catalog Gateway

Read-only product lookup used for pricing and checkout. The catalog is
owned by another service; this module only consumes it, either from the
local seeded catalog or over HTTP.
"""

import asyncio
import logging
from typing import Iterable, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..core.config import Settings, settings
from ..core.errors import CatalogUnavailable
from ..database.products import ProductDatabase, product_db
from ..models.product import Product

logger = logging.getLogger(__name__)


class CatalogGateway(Protocol):
    async def get_product(self, product_id: str) -> Optional[Product]:
        """Return the product, or None if the catalog does not know it"""
        ...

    async def close(self) -> None:
        ...


class LocalCatalogGateway:
    """Catalog lookups served from the in-process product database"""

    def __init__(self, db: ProductDatabase):
        self._db = db

    async def get_product(self, product_id: str) -> Optional[Product]:
        return self._db.get_product(product_id)

    async def close(self) -> None:
        pass


class HttpCatalogGateway:
    """
    Client for a remote catalog service.

    Expects ``GET {base_url}/api/products/{id}`` to answer with a product
    body, or 404 for unknown ids.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize catalog client.

        Args:
            base_url: Base URL of the catalog API
            timeout: Per-request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def get_product(self, product_id: str) -> Optional[Product]:
        try:
            response = await self._http_client.get(f"/api/products/{product_id}")
        except httpx.HTTPError as e:
            logger.error(f"Catalog request for {product_id} failed: {e}")
            raise CatalogUnavailable() from e

        if response.status_code == 404:
            return None

        if response.is_error:
            logger.error(
                f"Catalog returned {response.status_code} for {product_id}: {response.text[:200]}"
            )
            raise CatalogUnavailable()

        try:
            return Product.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Catalog returned a malformed product for {product_id}: {e}")
            raise CatalogUnavailable() from e


async def fetch_products(
    catalog: CatalogGateway,
    product_ids: Iterable[str],
) -> dict[str, Optional[Product]]:
    """
    Look up each distinct product concurrently.

    If any lookup fails, the others are cancelled before the error is
    re-raised.
    """
    product_ids = list(dict.fromkeys(product_ids))
    tasks = [asyncio.ensure_future(catalog.get_product(product_id)) for product_id in product_ids]
    try:
        products = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return dict(zip(product_ids, products))


def build_catalog_gateway(config: Settings) -> CatalogGateway:
    """Pick the remote catalog when one is configured, else the local one"""
    if config.remote_catalog_configured:
        logger.info(f"Using remote catalog at {config.catalog_base_url}")
        return HttpCatalogGateway(
            config.catalog_base_url,
            timeout=config.catalog_timeout_seconds,
        )
    return LocalCatalogGateway(product_db)


# Singleton instance
catalog_gateway = build_catalog_gateway(settings)


def get_catalog_gateway() -> CatalogGateway:
    return catalog_gateway
