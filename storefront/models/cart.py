"""Cart models for the storefront"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from .base import ApiModel


class CartLine(ApiModel):
    """One (product, variant) entry in an owner's cart"""
    id: int
    product_id: str
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime

    @property
    def identity(self) -> tuple[str, Optional[str], Optional[str]]:
        """Merge key within a single owner's cart"""
        return (self.product_id, self.size, self.color)


class AddToCartRequest(ApiModel):
    """Request to add a product variant to the cart"""
    product_id: str
    # Validated by the cart store so the error surfaces as InvalidQuantity
    quantity: int = 1
    size: Optional[str] = None
    color: Optional[str] = None


class UpdateCartLineRequest(ApiModel):
    """Request to set a cart line's quantity"""
    quantity: int


class PricingSummary(ApiModel):
    """Cart totals, rounded to cents"""
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    currency: str = "USD"
    unavailable_product_ids: list[str] = []


class CartSummary(PricingSummary):
    """Cart lines together with their current totals"""
    lines: list[CartLine] = []
    item_count: int = 0
