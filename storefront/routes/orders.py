"""Order API routes for the storefront"""

import logging

from fastapi import APIRouter, Depends

from ..database.orders import order_db
from ..models.checkout import BillingInfo, Order
from ..models.owner import OwnerKey
from ..security.identity import require_owner
from ..services.consolidator import OrderConsolidator, get_consolidator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=Order, status_code=201)
async def place_order(
    billing: BillingInfo,
    owner: OwnerKey = Depends(require_owner),
    consolidator: OrderConsolidator = Depends(get_consolidator),
):
    """
    Place an order for the caller's current cart.

    Totals are computed server-side from catalog prices; the cart is
    emptied once the order is stored.
    """
    return await consolidator.consolidate(owner, billing)


@router.get("", response_model=list[Order])
async def list_my_orders(limit: int = 50, owner: OwnerKey = Depends(require_owner)):
    """List the caller's orders, newest first"""
    return order_db.list_orders(owner=owner, limit=limit)


@router.get("/{order_id}", response_model=Order)
async def get_my_order(order_id: int, owner: OwnerKey = Depends(require_owner)):
    """Get one of the caller's orders"""
    return order_db.get_order_for(owner, order_id)
