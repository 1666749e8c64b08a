"""Tests for the savings calculator."""

from decimal import Decimal

import pytest

from promotions.models.discount import DiscountType
from promotions.services.savings import calculate_savings, to_money


class TestCalculateSavings:
    def test_percentage(self):
        result = calculate_savings(DiscountType.PERCENTAGE, Decimal("15"), Decimal("80.00"))
        assert result.subtotal_discount == Decimal("12.00")
        assert result.shipping_discount == Decimal("0.00")

    def test_percentage_rounds_half_up(self):
        result = calculate_savings("percentage", Decimal("10"), Decimal("0.25"))
        assert result.subtotal_discount == Decimal("0.03")

    def test_full_percentage_never_exceeds_subtotal(self):
        result = calculate_savings("percentage", Decimal("100"), Decimal("42.10"))
        assert result.subtotal_discount == Decimal("42.10")

    @pytest.mark.parametrize(
        ("value", "subtotal", "expected"),
        [("5", "30.00", "5.00"), ("50", "30.00", "30.00"), ("5", "0", "0.00")],
    )
    def test_fixed_amount_capped_at_subtotal(self, value, subtotal, expected):
        result = calculate_savings("fixed_amount", Decimal(value), Decimal(subtotal))
        assert result.subtotal_discount == Decimal(expected)

    def test_free_shipping_only_touches_shipping(self):
        result = calculate_savings(
            DiscountType.FREE_SHIPPING, Decimal("0"), Decimal("80.00"), Decimal("9.99")
        )
        assert result.subtotal_discount == Decimal("0.00")
        assert result.shipping_discount == Decimal("9.99")
        assert result.total == Decimal("9.99")

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            calculate_savings("bogo", Decimal("1"), Decimal("10"))


def test_to_money():
    assert to_money("2.345") == Decimal("2.35")
    assert to_money(None) == Decimal("0.00")
    assert to_money(3) == Decimal("3.00")
