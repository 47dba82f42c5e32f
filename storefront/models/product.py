"""Product models for the storefront catalog"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import ApiModel


class ProductCategory(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    OUTERWEAR = "outerwear"
    FOOTWEAR = "footwear"
    ACCESSORIES = "accessories"


class Product(ApiModel):
    """Product in the catalog"""
    id: str
    name: str
    slug: str
    description: str = ""
    price: Decimal = Field(gt=0, decimal_places=2)
    original_price: Optional[Decimal] = None
    category: ProductCategory
    sizes: list[str] = []
    colors: list[str] = []
    image_url: Optional[str] = None
    stock: int = Field(ge=0, default=0)
    featured: bool = False
    active: bool = True

    def can_fulfil(self, quantity: int) -> bool:
        """Whether an order for ``quantity`` units could be placed right now"""
        return self.active and self.stock >= quantity


class ProductSearchResponse(ApiModel):
    """Page of catalog search results"""
    products: list[Product]
    total: int
    limit: int
    offset: int
