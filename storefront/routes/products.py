"""Product API routes for the storefront"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..database.products import product_db
from ..models.product import Product, ProductCategory, ProductSearchResponse

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    search: Optional[str] = Query(None, description="Match against name and description"),
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0, description="Maximum price"),
    featured: Optional[bool] = Query(None, description="Only featured (or non-featured) items"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Browse active products in the catalog"""
    products, total = product_db.search_products(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/categories", response_model=list[str])
async def list_categories():
    """List all product categories"""
    return [c.value for c in ProductCategory]


@router.get("/by-slug/{slug}", response_model=Product)
async def get_product_by_slug(slug: str):
    """Get a product by its URL slug"""
    product = product_db.get_product_by_slug(slug)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """
    Get a product by ID.

    Inactive products are still returned so carts and order history can
    show them; checkout refuses them.
    """
    product = product_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
