"""Back-office API routes for the storefront"""

import logging

from fastapi import APIRouter, Depends

from ..database.orders import order_db
from ..models.checkout import Order, UpdateOrderStatusRequest
from ..models.owner import OwnerKey
from ..security.identity import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/orders", response_model=list[Order])
async def list_all_orders(limit: int = 50, admin: OwnerKey = Depends(require_admin)):
    """List recent orders of every customer"""
    return order_db.list_orders(limit=limit)


@router.put("/orders/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: int,
    request: UpdateOrderStatusRequest,
    admin: OwnerKey = Depends(require_admin),
):
    """Move an order to a new fulfilment status"""
    order = order_db.update_status(order_id, request.status)
    logger.info(f"{admin} set order {order_id} to {request.status.value}")
    return order
