"""Implied-savings reconstruction for zero-amount ledger rows.

Automatic offers and buy-x-get-y deals usually show up as reduced or zeroed
item prices instead of a deduction, so checkout records them with
``amount == 0``. For reporting, the saving is rebuilt by comparing each order
line against the current catalog price of its variant (or product).

Known limitation: the baseline is the catalog price *today*, not the price at
sale time. Historical figures drift if prices change.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from promotions.models.discount import DiscountType
from promotions.repositories.usage_repository import PricedOrderItem, UsageRepository
from promotions.services.promotion_kind import (
    BXGY_OFFER_KINDS,
    MetadataKind,
    OfferKind,
    metadata_value,
)
from promotions.services.savings import ZERO, to_money

logger = logging.getLogger(__name__)


class LedgerEntry(Protocol):
    order_id: UUID
    amount: Decimal
    discount_type: str | None
    discount_metadata: dict[str, Any] | None


@dataclass
class OrderSavings:
    offer_savings: Decimal = ZERO
    gift_savings: Decimal = ZERO


@dataclass(frozen=True)
class EffectiveAmount:
    amount: Decimal
    reconstructed: bool = False


def _is_standard_offer(metadata: Mapping[str, Any] | None) -> bool:
    return (
        metadata_value(metadata, "kind") == MetadataKind.OFFER.value
        and metadata_value(metadata, "offerKind") == OfferKind.STANDARD.value
    )


def _is_bxgy_deal(metadata: Mapping[str, Any] | None) -> bool:
    return (
        metadata_value(metadata, "kind") == MetadataKind.DEAL.value
        and metadata_value(metadata, "offerKind") in BXGY_OFFER_KINDS
    )


def is_reconstruction_candidate(
    amount: Decimal,
    discount_type: str | None,
    metadata: Mapping[str, Any] | None,
) -> bool:
    """Zero stored amount, not free shipping, and an offer/standard or BXGY deal."""
    if Decimal(str(amount)) != 0:
        return False
    if discount_type == DiscountType.FREE_SHIPPING.value:
        return False
    return _is_standard_offer(metadata) or _is_bxgy_deal(metadata)


def accumulate_order_savings(items: Iterable[PricedOrderItem]) -> dict[UUID, OrderSavings]:
    """Sum offer and gift savings per order.

    Lines with no quantity or no positive base price are skipped. A line
    priced at or above its base price contributes nothing.
    """
    savings: dict[UUID, OrderSavings] = {}
    for item in items:
        if item.quantity <= 0:
            continue
        base = item.base_price
        if base is None or base <= 0:
            continue

        acc = savings.setdefault(item.order_id, OrderSavings())
        if item.unit_price == 0 and item.total_price == 0:
            acc.gift_savings += base * item.quantity
        elif 0 < item.unit_price < base:
            acc.offer_savings += (base - item.unit_price) * item.quantity
    return savings


def savings_source(metadata: Mapping[str, Any] | None) -> str:
    """Name the order accumulator a candidate draws on: ``offer`` or ``gift``."""
    return "offer" if _is_standard_offer(metadata) else "gift"


def implied_amount(metadata: Mapping[str, Any] | None, savings: OrderSavings | None) -> Decimal:
    """Pick the accumulator matching the discount's mechanism, rounded and floored at 0."""
    if savings is None:
        return to_money(ZERO)
    if savings_source(metadata) == "offer":
        value = savings.offer_savings
    else:
        value = savings.gift_savings
    return max(to_money(value), to_money(ZERO))


class ImpliedSavingsReconstructor:
    """Replace zero ledger amounts with savings implied by order item prices."""

    def __init__(self, db: Session):
        self.usage_repo = UsageRepository(db)

    def apply(self, rows: Sequence[LedgerEntry]) -> list[EffectiveAmount]:
        """Return one effective amount per row, in input order.

        Non-candidate rows keep their stored amount. Item prices for all
        candidate orders are fetched in one batched query.
        """
        candidates = [
            is_reconstruction_candidate(row.amount, row.discount_type, row.discount_metadata)
            for row in rows
        ]
        if not any(candidates):
            return [EffectiveAmount(amount=to_money(row.amount)) for row in rows]

        order_ids = [row.order_id for row, flag in zip(rows, candidates, strict=True) if flag]
        savings = accumulate_order_savings(self.usage_repo.priced_items_for_orders(order_ids))

        results = []
        for row, flag in zip(rows, candidates, strict=True):
            if flag:
                amount = implied_amount(row.discount_metadata, savings.get(row.order_id))
                results.append(EffectiveAmount(amount=amount, reconstructed=True))
            else:
                results.append(EffectiveAmount(amount=to_money(row.amount)))

        logger.debug("Reconstructed %s of %s ledger rows", sum(candidates), len(rows))
        return results
