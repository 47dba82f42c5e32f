"""Tests for cart pricing."""

from dataclasses import dataclass
from decimal import Decimal

import pytest

from storefront.services.pricing import PricingRules, active_prices, price, to_cents


@dataclass
class Line:
    product_id: str
    quantity: int


PRICES = {"a": Decimal("30.00"), "b": Decimal("20.00"), "c": Decimal("25.00"), "d": Decimal("10.05")}


class TestShipping:
    def test_free_above_threshold(self):
        result = price([Line("a", 2), Line("b", 1)], PRICES)
        assert result.subtotal == Decimal("80.00")
        assert result.shipping == Decimal("0")

    def test_flat_rate_below_threshold(self):
        result = price([Line("c", 2)], PRICES)
        assert result.subtotal == Decimal("50.00")
        assert result.shipping == Decimal("9.99")

    def test_threshold_itself_is_not_free(self):
        result = price([Line("c", 3)], PRICES)
        assert result.subtotal == Decimal("75.00")
        assert result.shipping == Decimal("9.99")

    def test_custom_rules(self):
        rules = PricingRules(
            free_shipping_threshold=Decimal("40"),
            shipping_flat_rate=Decimal("4.50"),
            tax_rate=Decimal("0.10"),
        )
        result = price([Line("c", 2)], PRICES, rules)
        assert result.shipping == Decimal("0")
        assert result.tax == Decimal("5.000")


class TestTotals:
    @pytest.mark.parametrize(
        "lines",
        [
            [Line("a", 1)],
            [Line("a", 2), Line("b", 1)],
            [Line("d", 7)],
            [Line("b", 3), Line("c", 1), Line("d", 2)],
        ],
    )
    def test_tax_and_total(self, lines):
        result = price(lines, PRICES)
        assert result.tax == result.subtotal * Decimal("0.08")
        assert result.total == result.subtotal + result.shipping + result.tax

    def test_end_to_end_example(self):
        summary = price([Line("a", 2), Line("b", 1)], PRICES).rounded()

        assert summary.subtotal == Decimal("80.00")
        assert summary.shipping == Decimal("0.00")
        assert summary.tax == Decimal("6.40")
        assert summary.total == Decimal("86.40")
        assert summary.unavailable_product_ids == []

    def test_rounding_happens_only_at_the_boundary(self):
        result = price([Line("d", 1)], PRICES)

        # 10.05 * 0.08 = 0.804 is kept exact until presentation
        assert result.tax == Decimal("0.8040")
        assert result.total == Decimal("20.8440")

        summary = result.rounded()
        assert summary.tax == Decimal("0.80")
        assert summary.total == Decimal("20.84")
        assert summary.subtotal + summary.shipping + summary.tax == summary.total

    def test_half_cent_rounds_up(self):
        assert to_cents(Decimal("0.125")) == Decimal("0.13")
        assert to_cents(Decimal("0.124")) == Decimal("0.12")

    def test_empty_cart(self):
        result = price([], PRICES)
        assert result.subtotal == Decimal("0")
        assert result.tax == Decimal("0")
        assert result.is_complete


class TestUnavailableProducts:
    def test_missing_product_contributes_zero_and_is_flagged(self):
        result = price([Line("a", 1), Line("gone", 5), Line("gone", 1)], PRICES)

        assert result.subtotal == Decimal("30.00")
        assert result.unavailable_product_ids == ("gone",)
        assert not result.is_complete

    def test_active_prices_skips_inactive_and_missing(self, product_factory):
        products = {
            "a": product_factory("a", "30.00"),
            "off": product_factory("off", "12.00", active=False),
            "gone": None,
        }
        assert active_prices(products) == {"a": Decimal("30.00")}
