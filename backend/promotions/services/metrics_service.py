"""Dashboard rollups over the discount catalog and usage ledger."""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promotions.core.config import settings
from promotions.core.results import ErrorCode, ServiceResult, failure, success
from promotions.models.discount import DiscountStatus
from promotions.models.shared import as_utc, utc_now
from promotions.repositories.metrics_repository import MetricsRepository
from promotions.repositories.setting_repository import SettingRepository
from promotions.schemas.discount import DiscountFilters
from promotions.schemas.metrics import (
    DiscountMetricsResponse,
    DiscountTypeCount,
    PromotionKindBreakdown,
)
from promotions.services.promotion_kind import PromotionKind, classify_promotion
from promotions.services.reconstruction import ImpliedSavingsReconstructor, savings_source
from promotions.services.savings import ZERO, to_money

logger = logging.getLogger(__name__)

CURRENCY_SETTING_KEY = "currency"


class MetricsService:
    """Aggregates counts and discount totals under the listing filters.

    Discount totals include implied savings of zero-amount ledger rows. An
    order's offer or gift saving is counted once, against the earliest
    discount that recorded it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = MetricsRepository(db)
        self.setting_repo = SettingRepository(db)
        self.reconstructor = ImpliedSavingsReconstructor(db)

    def get_metrics(
        self, filters: DiscountFilters, now: datetime | None = None
    ) -> ServiceResult[DiscountMetricsResponse]:
        now = as_utc(now) if now else utc_now()
        since = now - timedelta(days=settings.METRICS_TRAILING_DAYS)
        try:
            by_status = self.repo.count_by_status(filters)
            total_discounts = self.repo.count_total(filters)
            active_now_count = self.repo.count_active_now(filters, now)
            total_usage = self.repo.sum_usage(filters)
            by_type = self.repo.count_by_type(filters)
            summaries = self.repo.discount_summaries(filters)
            totals, totals_recent = self._discount_totals(filters, since)
            currency = self.setting_repo.get_value(CURRENCY_SETTING_KEY)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to compute discount metrics")
            return failure(ErrorCode.METRICS_FAILED, "Failed to compute discount metrics")

        kind_counts: dict[PromotionKind, int] = defaultdict(int)
        kind_usage: dict[PromotionKind, int] = defaultdict(int)
        kind_amounts: dict[PromotionKind, Decimal] = defaultdict(Decimal)
        for summary in summaries:
            kind = classify_promotion(summary.is_automatic, summary.metadata).kind
            kind_counts[kind] += 1
            kind_usage[kind] += summary.usage_count
            kind_amounts[kind] += totals.get(summary.id, ZERO)

        return success(
            DiscountMetricsResponse(
                total_discounts=total_discounts,
                draft_count=by_status.get(DiscountStatus.DRAFT.value, 0),
                active_count=by_status.get(DiscountStatus.ACTIVE.value, 0),
                expired_count=by_status.get(DiscountStatus.EXPIRED.value, 0),
                archived_count=by_status.get(DiscountStatus.ARCHIVED.value, 0),
                active_now_count=active_now_count,
                total_usage=total_usage,
                total_discount_given=to_money(sum(totals.values(), ZERO)),
                total_discount_given_30d=to_money(sum(totals_recent.values(), ZERO)),
                currency=currency or settings.DEFAULT_CURRENCY,
                by_type=[DiscountTypeCount(type=t, count=c) for t, c in by_type],
                by_kind=[
                    PromotionKindBreakdown(
                        kind=kind,
                        label=kind.label,
                        discount_count=kind_counts[kind],
                        usage_count=kind_usage[kind],
                        total_amount=to_money(kind_amounts[kind]),
                    )
                    for kind in PromotionKind
                ],
            )
        )

    def _discount_totals(
        self, filters: DiscountFilters, since: datetime
    ) -> tuple[dict[UUID, Decimal], dict[UUID, Decimal]]:
        """Stored ledger amounts plus reconstructed savings, per discount.

        Returns the all-time totals and the totals recorded at or after
        ``since``. Candidate rows are fetched and reconstructed once.
        """
        totals: dict[UUID, Decimal] = defaultdict(Decimal)
        totals.update(self.repo.ledger_totals_by_discount(filters))
        recent: dict[UUID, Decimal] = defaultdict(Decimal)
        recent.update(self.repo.ledger_totals_by_discount(filters, since))

        candidates = self.repo.zero_amount_ledger_rows(filters)
        claimed: set[tuple[UUID, str]] = set()
        for row, result in zip(candidates, self.reconstructor.apply(candidates), strict=True):
            if not result.reconstructed:
                continue
            # Several discounts on one order share the same item price difference.
            key = (row.order_id, savings_source(row.discount_metadata))
            if key in claimed:
                continue
            claimed.add(key)
            totals[row.discount_id] += result.amount
            if as_utc(row.created_at) >= since:
                recent[row.discount_id] += result.amount
        return dict(totals), dict(recent)
