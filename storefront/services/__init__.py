# Service layer

from .catalog_client import (
    CatalogGateway,
    HttpCatalogGateway,
    LocalCatalogGateway,
    catalog_gateway,
    fetch_products,
    get_catalog_gateway,
)
from .pricing import PriceBreakdown, PricingRules, price, to_cents
from .consolidator import OrderConsolidator, consolidator, get_consolidator

__all__ = [
    "CatalogGateway",
    "HttpCatalogGateway",
    "LocalCatalogGateway",
    "catalog_gateway",
    "fetch_products",
    "get_catalog_gateway",
    "PriceBreakdown",
    "PricingRules",
    "price",
    "to_cents",
    "OrderConsolidator",
    "consolidator",
    "get_consolidator",
]
