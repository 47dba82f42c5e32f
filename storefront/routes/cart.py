"""Cart API routes for the storefront"""

import logging

from fastapi import APIRouter, Depends, Response

from ..core.errors import IdentityMissing, ProductUnavailable
from ..database.carts import cart_db
from ..models.cart import AddToCartRequest, CartLine, CartSummary, UpdateCartLineRequest
from ..models.owner import OwnerKey
from ..security.identity import RequestIdentity, request_identity, require_owner
from ..services.catalog_client import CatalogGateway, fetch_products, get_catalog_gateway
from ..services.pricing import PricingRules, active_prices, get_pricing_rules, price

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=list[CartLine])
async def get_cart(owner: OwnerKey = Depends(require_owner)):
    """List the cart lines of the caller"""
    return await cart_db.list_lines(owner)


@router.get("/summary", response_model=CartSummary)
async def get_cart_summary(
    owner: OwnerKey = Depends(require_owner),
    catalog: CatalogGateway = Depends(get_catalog_gateway),
    rules: PricingRules = Depends(get_pricing_rules),
):
    """Cart lines with their current totals"""
    lines = await cart_db.list_lines(owner)
    products = await fetch_products(catalog, (line.product_id for line in lines))
    breakdown = price(lines, active_prices(products), rules)
    summary = breakdown.rounded()
    return CartSummary(
        **summary.model_dump(),
        lines=lines,
        item_count=sum(line.quantity for line in lines),
    )


@router.post("", response_model=CartLine)
async def add_to_cart(
    request: AddToCartRequest,
    owner: OwnerKey = Depends(require_owner),
    catalog: CatalogGateway = Depends(get_catalog_gateway),
):
    """Add a product to the cart, merging with an identical line"""
    product = await catalog.get_product(request.product_id)
    if not product or not product.active:
        raise ProductUnavailable([request.product_id])

    line = await cart_db.add(
        owner,
        product_id=request.product_id,
        quantity=request.quantity,
        size=request.size,
        color=request.color,
    )
    logger.info(f"{owner} added {request.quantity}x {product.id} (line {line.id}, now {line.quantity})")
    return line


@router.post("/merge", response_model=list[CartLine])
async def merge_guest_cart(identity: RequestIdentity = Depends(request_identity)):
    """Move the anonymous session cart into the signed-in user's cart"""
    if not identity.user_id or not identity.session_id:
        raise IdentityMissing("Merging requires both a signed-in user and a session id")

    return await cart_db.merge(
        source=OwnerKey.session(identity.session_id),
        target=OwnerKey.user(identity.user_id),
    )


@router.put("/{line_id}", response_model=CartLine)
async def update_cart_line(
    line_id: int,
    request: UpdateCartLineRequest,
    owner: OwnerKey = Depends(require_owner),
):
    """Set the quantity of a cart line"""
    return await cart_db.update_quantity(owner, line_id, request.quantity)


@router.delete("/{line_id}", status_code=204)
async def remove_cart_line(line_id: int, owner: OwnerKey = Depends(require_owner)):
    """Remove a cart line"""
    await cart_db.remove(owner, line_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
async def clear_cart(owner: OwnerKey = Depends(require_owner)):
    """Remove every line from the cart"""
    await cart_db.clear(owner)
    return Response(status_code=204)
