"""
Order Consolidator

Turns an owner's cart into a priced order. Each attempt either commits an
order with all of its items and clears the cart, or aborts with no visible
effect. The owner's cart stays locked for the whole attempt, so a
concurrent add lands either in the order or in the fresh cart afterwards.
"""

import asyncio
import logging
import uuid
from collections import Counter
from enum import Enum
from typing import Optional

from ..core.config import settings
from ..core.errors import EmptyCart, PersistenceError, ProductUnavailable, StorefrontError, Timeout
from ..database.carts import CartDatabase, cart_db
from ..database.orders import OrderDatabase, order_db
from ..models.cart import CartLine
from ..models.checkout import BillingInfo, Order
from ..models.owner import OwnerKey
from ..models.product import Product
from .catalog_client import CatalogGateway, catalog_gateway, fetch_products
from .pricing import PriceBreakdown, PricingRules, active_prices, price, pricing_rules, to_cents

logger = logging.getLogger(__name__)


class ConsolidationState(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ABORTED = "aborted"


class OrderConsolidator:
    """Checkout: cart lines + catalog prices -> order + items -> empty cart"""

    def __init__(
        self,
        carts: CartDatabase,
        orders: OrderDatabase,
        catalog: CatalogGateway,
        rules: Optional[PricingRules] = None,
        storage_timeout: float = 5.0,
    ):
        self._carts = carts
        self._orders = orders
        self._catalog = catalog
        self._rules = rules or PricingRules()
        self._storage_timeout = storage_timeout

    async def consolidate(self, owner: OwnerKey, billing: BillingInfo) -> Order:
        """
        Place an order for everything in ``owner``'s cart.

        Raises:
            EmptyCart: the cart has no lines
            ProductUnavailable: a product is unknown, inactive or short on stock
            CatalogUnavailable: the catalog could not be reached
            PersistenceError: the order could not be written
            Timeout: the cart lock or the order write timed out
        """
        attempt = uuid.uuid4().hex[:8]
        self._log_state(attempt, owner, ConsolidationState.PENDING)

        try:
            async with self._carts.checkout(owner) as cart:
                lines = cart.lines()
                if not lines:
                    raise EmptyCart()

                products = await fetch_products(self._catalog, (line.product_id for line in lines))
                self._ensure_available(lines, products)

                # Prices are fetched once and reused for both totals and item snapshots
                breakdown = price(lines, active_prices(products), self._rules)
                order = await self._persist(owner, billing, lines, products, breakdown)

                try:
                    cart.clear()
                except Exception:
                    logger.exception(
                        f"[{attempt}] Order {order.id} committed but cart of {owner} was not cleared"
                    )
        except StorefrontError as e:
            self._log_state(attempt, owner, ConsolidationState.ABORTED, reason=e.code)
            raise

        self._log_state(attempt, owner, ConsolidationState.COMMITTED, reason=f"order={order.id}")
        logger.info(
            f"Order {order.id} created for {owner}: {len(order.items)} items, "
            f"total {order.total} {order.currency}"
        )
        return order

    @staticmethod
    def _ensure_available(lines: list[CartLine], products: dict[str, Optional[Product]]) -> None:
        # Variants of one product draw on the same stock
        requested = Counter()
        for line in lines:
            requested[line.product_id] += line.quantity

        unavailable = [
            product_id
            for product_id, quantity in requested.items()
            if products.get(product_id) is None or not products[product_id].can_fulfil(quantity)
        ]
        if unavailable:
            raise ProductUnavailable(unavailable)

    async def _persist(
        self,
        owner: OwnerKey,
        billing: BillingInfo,
        lines: list[CartLine],
        products: dict[str, Optional[Product]],
        breakdown: PriceBreakdown,
    ) -> Order:
        try:
            async with asyncio.timeout(self._storage_timeout):
                return await self._write_order(owner, billing, lines, products, breakdown)
        except TimeoutError:
            logger.warning(f"Order write for {owner} timed out after {self._storage_timeout}s")
            raise Timeout() from None
        except StorefrontError:
            raise
        except Exception as e:
            logger.error(f"Order write for {owner} failed: {e}")
            raise PersistenceError() from e

    async def _write_order(
        self,
        owner: OwnerKey,
        billing: BillingInfo,
        lines: list[CartLine],
        products: dict[str, Optional[Product]],
        breakdown: PriceBreakdown,
    ) -> Order:
        summary = breakdown.rounded()
        async with self._orders.transaction() as tx:
            order = tx.add_order(
                owner,
                billing,
                subtotal=summary.subtotal,
                shipping=summary.shipping,
                tax=summary.tax,
                total=summary.total,
                currency=summary.currency,
            )
            for line in lines:
                product = products[line.product_id]
                tx.add_item(
                    order,
                    product_id=product.id,
                    product_name=product.name,
                    product_price=to_cents(product.price),
                    quantity=line.quantity,
                    size=line.size,
                    color=line.color,
                )
        return order

    @staticmethod
    def _log_state(
        attempt: str,
        owner: OwnerKey,
        state: ConsolidationState,
        reason: Optional[str] = None,
    ) -> None:
        suffix = f" ({reason})" if reason else ""
        level = logging.WARNING if state == ConsolidationState.ABORTED else logging.INFO
        logger.log(level, f"[{attempt}] Checkout for {owner}: {state.value}{suffix}")


# Singleton instance
consolidator = OrderConsolidator(
    carts=cart_db,
    orders=order_db,
    catalog=catalog_gateway,
    rules=pricing_rules,
    storage_timeout=settings.storage_timeout_seconds,
)


def get_consolidator() -> OrderConsolidator:
    return consolidator
