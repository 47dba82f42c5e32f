"""Order storage for the storefront"""

import itertools
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from ..core.errors import OrderNotFound, PersistenceError
from ..models.checkout import BillingInfo, Order, OrderItem, OrderStatus
from ..models.owner import OwnerKey

logger = logging.getLogger(__name__)


class OrderTransaction:
    """
    Staged writes for one order header and its items.

    Nothing staged here is visible to readers until the owning
    ``OrderDatabase.transaction`` block exits without an exception.
    """

    def __init__(self, db: "OrderDatabase"):
        self._db = db
        self._orders: list[Order] = []

    def add_order(
        self,
        owner: OwnerKey,
        billing: BillingInfo,
        subtotal,
        shipping,
        tax,
        total,
        currency: str = "USD",
    ) -> Order:
        """Stage an order header; its id is allocated immediately"""
        order = Order(
            id=next(self._db._order_ids),
            user_id=owner.user_id,
            session_id=owner.session_id,
            **billing.model_dump(),
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=total,
            currency=currency,
            status=OrderStatus.PENDING,
            created_at=datetime.now(timezone.utc),
            items=[],
        )
        self._orders.append(order)
        return order

    def add_item(
        self,
        order: Order,
        product_id: str,
        product_name: str,
        product_price,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> OrderItem:
        """Stage an item of a header staged in this transaction"""
        if not any(staged is order for staged in self._orders):
            raise PersistenceError(f"Order {order.id} is not part of this transaction")

        item = OrderItem(
            id=next(self._db._item_ids),
            order_id=order.id,
            product_id=product_id,
            product_name=product_name,
            product_price=product_price,
            quantity=quantity,
            size=size,
            color=color,
        )
        order.items.append(item)
        return item

    def _commit(self) -> list[Order]:
        for order in self._orders:
            self._db.orders[order.id] = order
        return self._orders


class OrderDatabase:
    """In-memory order storage with all-or-nothing writes"""

    def __init__(self):
        self.orders: dict[int, Order] = {}
        self._order_ids = itertools.count(1)
        self._item_ids = itertools.count(1)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[OrderTransaction]:
        """
        Open a write transaction.

        Staged orders are published together when the block completes and
        discarded if it raises or is cancelled.
        """
        tx = OrderTransaction(self)
        try:
            yield tx
        except BaseException:
            logger.debug(f"Discarding {len(tx._orders)} staged orders")
            raise
        tx._commit()

    def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def get_order_for(self, owner: OwnerKey, order_id: int) -> Order:
        """Get an order placed by ``owner``"""
        order = self.get_order(order_id)
        if not order or not self._placed_by(order, owner):
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, owner: Optional[OwnerKey] = None, limit: int = 50) -> list[Order]:
        """List recent orders, optionally only those placed by ``owner``"""
        orders = list(self.orders.values())
        if owner is not None:
            orders = [o for o in orders if self._placed_by(o, owner)]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return orders[:limit]

    def update_status(self, order_id: int, status: OrderStatus) -> Order:
        """Update order status"""
        order = self.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        updated = order.model_copy(update={"status": status})
        self.orders[order_id] = updated
        logger.info(f"Order {order_id} status: {order.status.value} -> {status.value}")
        return updated

    def reset(self) -> None:
        """Drop all orders"""
        self.orders.clear()

    @staticmethod
    def _placed_by(order: Order, owner: OwnerKey) -> bool:
        if owner.is_user:
            return order.user_id == owner.id
        return order.session_id == owner.id


# Singleton instance
order_db = OrderDatabase()
