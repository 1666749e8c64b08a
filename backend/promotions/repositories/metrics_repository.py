from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func as sa_func
from sqlalchemy import select
from sqlalchemy.orm import Session

from promotions.models.discount import Discount, DiscountType
from promotions.models.order_discount import OrderDiscount, OrderItemDiscount
from promotions.repositories.discount_repository import discount_filter_clauses
from promotions.schemas.discount import DiscountFilters
from promotions.services.eligibility import active_now_clause


@dataclass
class DiscountSummary:
    id: UUID
    type: str
    is_automatic: bool
    metadata: dict[str, Any] | None
    usage_count: int


@dataclass
class CandidateLedgerRow:
    discount_id: UUID
    order_id: UUID
    amount: Decimal
    created_at: datetime
    discount_type: str | None
    discount_metadata: dict[str, Any] | None


class MetricsRepository:
    def __init__(self, db: Session):
        self.db = db

    def _matching_ids(self, filters: DiscountFilters) -> Any:
        return select(Discount.id).where(*discount_filter_clauses(filters))

    def count_total(self, filters: DiscountFilters) -> int:
        return (
            self.db.query(sa_func.count(Discount.id))
            .filter(*discount_filter_clauses(filters))
            .scalar()
            or 0
        )

    def count_by_status(self, filters: DiscountFilters) -> dict[str, int]:
        rows = (
            self.db.query(Discount.status, sa_func.count(Discount.id))
            .filter(*discount_filter_clauses(filters))
            .group_by(Discount.status)
            .all()
        )
        return {status: count for status, count in rows}

    def count_active_now(self, filters: DiscountFilters, now: datetime | None = None) -> int:
        return (
            self.db.query(sa_func.count(Discount.id))
            .filter(*discount_filter_clauses(filters, now), active_now_clause(now))
            .scalar()
            or 0
        )

    def sum_usage(self, filters: DiscountFilters) -> int:
        result = (
            self.db.query(sa_func.coalesce(sa_func.sum(Discount.usage_count), 0))
            .filter(*discount_filter_clauses(filters))
            .scalar()
        )
        return int(result or 0)

    def count_by_type(self, filters: DiscountFilters) -> list[tuple[str, int]]:
        rows = (
            self.db.query(Discount.type, sa_func.count(Discount.id))
            .filter(*discount_filter_clauses(filters))
            .group_by(Discount.type)
            .order_by(Discount.type)
            .all()
        )
        return [(discount_type, count) for discount_type, count in rows]

    def discount_summaries(self, filters: DiscountFilters) -> list[DiscountSummary]:
        rows = (
            self.db.query(
                Discount.id,
                Discount.type,
                Discount.is_automatic,
                Discount.metadata_,
                Discount.usage_count,
            )
            .filter(*discount_filter_clauses(filters))
            .all()
        )
        return [
            DiscountSummary(
                id=row[0],
                type=row[1],
                is_automatic=bool(row[2]),
                metadata=row[3],
                usage_count=row[4] or 0,
            )
            for row in rows
        ]

    def ledger_totals_by_discount(
        self, filters: DiscountFilters, since: datetime | None = None
    ) -> dict[UUID, Decimal]:
        """Stored order-level plus item-level ledger amounts per matching discount."""
        matching = self._matching_ids(filters)
        totals: dict[UUID, Decimal] = defaultdict(Decimal)

        for model in (OrderDiscount, OrderItemDiscount):
            query = self.db.query(model.discount_id, sa_func.sum(model.amount)).filter(
                model.discount_id.in_(matching)
            )
            if since is not None:
                query = query.filter(model.created_at >= since)
            for discount_id, amount in query.group_by(model.discount_id).all():
                totals[discount_id] += Decimal(str(amount or 0))
        return dict(totals)

    def zero_amount_ledger_rows(self, filters: DiscountFilters) -> list[CandidateLedgerRow]:
        """Order-level rows recorded as 0 that may carry implied savings, oldest first."""
        rows = (
            self.db.query(
                OrderDiscount.discount_id,
                OrderDiscount.order_id,
                OrderDiscount.amount,
                OrderDiscount.created_at,
                Discount.type,
                Discount.metadata_,
            )
            .join(Discount, Discount.id == OrderDiscount.discount_id)
            .filter(
                OrderDiscount.discount_id.in_(self._matching_ids(filters)),
                OrderDiscount.amount == 0,
                Discount.type != DiscountType.FREE_SHIPPING.value,
            )
            .order_by(OrderDiscount.created_at, OrderDiscount.id)
            .all()
        )
        return [
            CandidateLedgerRow(
                discount_id=row[0],
                order_id=row[1],
                amount=Decimal(str(row[2])),
                created_at=row[3],
                discount_type=row[4],
                discount_metadata=row[5],
            )
            for row in rows
        ]
