"""Scope and eligibility checks for discounts.

Nothing here writes to the database. "Active now" is always evaluated against
the current clock; it is never stored as a status.
"""

from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import and_, or_

from promotions.models.discount import Discount, DiscountScope, DiscountStatus
from promotions.models.shared import as_utc, utc_now


class IneligibleReason(str, Enum):
    STATUS = "status"
    NOT_STARTED = "not_started"
    ENDED = "ended"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    BELOW_MIN_SUBTOTAL = "below_min_subtotal"


@dataclass
class Eligibility:
    active_now: bool
    remaining_uses: int | None
    reasons: list[IneligibleReason] = field(default_factory=list)

    @property
    def eligible(self) -> bool:
        return not self.reasons


def active_now_clause(now: datetime | None = None) -> Any:
    """SQL form of :func:`is_active_now`."""
    now = now or utc_now()
    return and_(
        Discount.status == DiscountStatus.ACTIVE.value,
        or_(Discount.starts_at.is_(None), Discount.starts_at <= now),
        or_(Discount.ends_at.is_(None), Discount.ends_at >= now),
    )


def _window_reasons(discount: Discount, now: datetime) -> list[IneligibleReason]:
    reasons = []
    if discount.starts_at is not None and as_utc(discount.starts_at) > now:
        reasons.append(IneligibleReason.NOT_STARTED)
    if discount.ends_at is not None and as_utc(discount.ends_at) < now:
        reasons.append(IneligibleReason.ENDED)
    return reasons


def is_active_now(discount: Discount, now: datetime | None = None) -> bool:
    """Active status and, when bounded, a time window containing ``now``."""
    now = as_utc(now) if now else utc_now()
    if discount.status != DiscountStatus.ACTIVE.value:
        return False
    return not _window_reasons(discount, now)


def remaining_uses(discount: Discount) -> int | None:
    """Uses left before ``usage_limit``; None when the discount is unlimited."""
    if discount.usage_limit is None:
        return None
    return max(0, discount.usage_limit - (discount.usage_count or 0))


def has_remaining_usage(discount: Discount) -> bool:
    remaining = remaining_uses(discount)
    return remaining is None or remaining > 0


def applies_to_product(
    discount: Discount,
    product_id: UUID,
    product_ids: Collection[UUID],
    category_ids: Collection[UUID],
    product_category_ids: Collection[UUID] = (),
) -> bool | None:
    """Whether a discount targets a product.

    ``product_ids`` and ``category_ids`` are the discount's target sets.
    Returns None for scopes resolved outside this service (collections and
    customer groups).
    """
    scope = discount.scope
    if scope == DiscountScope.ALL.value:
        return True
    if scope == DiscountScope.PRODUCTS.value:
        return product_id in set(product_ids)
    if scope == DiscountScope.CATEGORIES.value:
        return bool(set(category_ids) & set(product_category_ids))
    return None


def check_eligibility(
    discount: Discount,
    subtotal: Decimal | None = None,
    now: datetime | None = None,
) -> Eligibility:
    """Evaluate every usability rule and collect the ones that fail.

    The usage-limit check is advisory: checkout owns the counter.
    """
    now = as_utc(now) if now else utc_now()
    reasons: list[IneligibleReason] = []

    if discount.status != DiscountStatus.ACTIVE.value:
        reasons.append(IneligibleReason.STATUS)
    window = _window_reasons(discount, now)
    reasons.extend(window)

    if not has_remaining_usage(discount):
        reasons.append(IneligibleReason.USAGE_LIMIT_REACHED)

    if (
        subtotal is not None
        and discount.min_subtotal is not None
        and subtotal < Decimal(str(discount.min_subtotal))
    ):
        reasons.append(IneligibleReason.BELOW_MIN_SUBTOTAL)

    return Eligibility(
        active_now=discount.status == DiscountStatus.ACTIVE.value and not window,
        remaining_uses=remaining_uses(discount),
        reasons=reasons,
    )
