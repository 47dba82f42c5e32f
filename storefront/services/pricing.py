"""
Cart pricing.

Totals are computed with unrounded Decimal arithmetic; rounding to cents
happens only when a breakdown is presented or stored.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional, Protocol

from ..core.config import Settings, settings
from ..models.cart import PricingSummary
from ..models.product import Product

CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class PricedLine(Protocol):
    product_id: str
    quantity: int


@dataclass(frozen=True)
class PricingRules:
    """Flat shipping with a free-shipping threshold, and a single tax rate"""
    free_shipping_threshold: Decimal = Decimal("75.00")
    shipping_flat_rate: Decimal = Decimal("9.99")
    tax_rate: Decimal = Decimal("0.08")
    currency: str = "USD"

    @classmethod
    def from_settings(cls, config: Settings) -> "PricingRules":
        return cls(
            free_shipping_threshold=config.free_shipping_threshold,
            shipping_flat_rate=config.shipping_flat_rate,
            tax_rate=config.tax_rate,
            currency=config.currency,
        )

    def shipping_for(self, subtotal: Decimal) -> Decimal:
        if subtotal > self.free_shipping_threshold:
            return Decimal("0")
        return self.shipping_flat_rate


@dataclass(frozen=True)
class PriceBreakdown:
    """Unrounded totals for a set of cart lines"""
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    unavailable_product_ids: tuple[str, ...] = ()
    currency: str = "USD"

    @property
    def is_complete(self) -> bool:
        """True when every line could be priced"""
        return not self.unavailable_product_ids

    def rounded(self) -> PricingSummary:
        return PricingSummary(
            subtotal=to_cents(self.subtotal),
            shipping=to_cents(self.shipping),
            tax=to_cents(self.tax),
            total=to_cents(self.total),
            currency=self.currency,
            unavailable_product_ids=list(self.unavailable_product_ids),
        )


def price(
    lines: Iterable[PricedLine],
    catalog_prices: Mapping[str, Decimal],
    rules: Optional[PricingRules] = None,
) -> PriceBreakdown:
    """
    Price cart lines against unit prices keyed by product id.

    Lines whose product has no entry in ``catalog_prices`` add nothing to
    the subtotal and are reported in ``unavailable_product_ids``.
    """
    rules = rules or PricingRules()
    subtotal = Decimal("0")
    unavailable: list[str] = []

    for line in lines:
        unit_price = catalog_prices.get(line.product_id)
        if unit_price is None:
            if line.product_id not in unavailable:
                unavailable.append(line.product_id)
            continue
        subtotal += unit_price * line.quantity

    shipping = rules.shipping_for(subtotal)
    tax = subtotal * rules.tax_rate

    return PriceBreakdown(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
        unavailable_product_ids=tuple(unavailable),
        currency=rules.currency,
    )


def active_prices(products: Mapping[str, Optional[Product]]) -> dict[str, Decimal]:
    """Unit prices of the products that are present and active"""
    return {
        product_id: product.price
        for product_id, product in products.items()
        if product is not None and product.active
    }


pricing_rules = PricingRules.from_settings(settings)


def get_pricing_rules() -> PricingRules:
    return pricing_rules
