"""Nominal discount amounts for standard (non-bundle) rules."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from promotions.models.discount import DiscountType

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value: object) -> Decimal:
    """Quantize any numeric value to 2 places, half-up."""
    return Decimal(str(value if value is not None else 0)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SavingsBreakdown:
    """Result of a savings calculation.

    ``subtotal_discount`` is taken off merchandise; ``shipping_discount`` off
    shipping only.
    """

    subtotal_discount: Decimal
    shipping_discount: Decimal

    @property
    def total(self) -> Decimal:
        return self.subtotal_discount + self.shipping_discount


def calculate_savings(
    discount_type: DiscountType | str,
    value: Decimal,
    subtotal: Decimal,
    shipping_amount: Decimal = ZERO,
) -> SavingsBreakdown:
    """Calculate the discount for an eligible subtotal.

    Args:
        discount_type: The rule type.
        value: Percentage points for ``percentage``, a currency amount for
            ``fixed_amount``; ignored for ``free_shipping``.
        subtotal: The discountable merchandise subtotal.
        shipping_amount: Shipping cost, only used by ``free_shipping``.

    Returns:
        SavingsBreakdown. The merchandise discount never exceeds ``subtotal``.
    """
    discount_type = DiscountType(discount_type)
    subtotal = max(Decimal(str(subtotal)), ZERO)
    value = Decimal(str(value))

    if discount_type == DiscountType.FREE_SHIPPING:
        return SavingsBreakdown(
            subtotal_discount=to_money(ZERO),
            shipping_discount=to_money(max(Decimal(str(shipping_amount)), ZERO)),
        )

    if discount_type == DiscountType.PERCENTAGE:
        discount = subtotal * value / Decimal("100")
    else:
        discount = value

    discount = min(max(discount, ZERO), subtotal)
    return SavingsBreakdown(subtotal_discount=to_money(discount), shipping_discount=to_money(ZERO))
