# Data models

from .owner import OwnerKey, OwnerKind
from .cart import CartLine, AddToCartRequest, UpdateCartLineRequest, PricingSummary, CartSummary
from .product import Product, ProductCategory, ProductSearchResponse
from .checkout import (
    BillingInfo,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    UpdateOrderStatusRequest,
)

__all__ = [
    "OwnerKey",
    "OwnerKind",
    "CartLine",
    "AddToCartRequest",
    "UpdateCartLineRequest",
    "PricingSummary",
    "CartSummary",
    "Product",
    "ProductCategory",
    "ProductSearchResponse",
    "BillingInfo",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "UpdateOrderStatusRequest",
]
