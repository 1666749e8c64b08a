"""Usage listing for a single discount."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promotions.core.results import ErrorCode, ServiceResult, failure, success
from promotions.repositories.discount_repository import DiscountRepository
from promotions.repositories.usage_repository import UsageRepository
from promotions.schemas.usage import DiscountUsageItem, DiscountUsageResponse
from promotions.services.reconstruction import ImpliedSavingsReconstructor
from promotions.services.savings import to_money

logger = logging.getLogger(__name__)


class UsageService:
    def __init__(self, db: Session):
        self.db = db
        self.discount_repo = DiscountRepository(db)
        self.usage_repo = UsageRepository(db)
        self.reconstructor = ImpliedSavingsReconstructor(db)

    def list_usage(
        self, discount_id: UUID, page: int = 1, limit: int = 20
    ) -> ServiceResult[DiscountUsageResponse]:
        """Return one page of ledger rows, newest first, with implied savings filled in.

        ``total`` counts every ledger row for the discount, not just this page.
        """
        try:
            if not self.discount_repo.get_by_id(discount_id):
                return failure(ErrorCode.NOT_FOUND, "Discount not found")

            rows = self.usage_repo.get_page(discount_id, skip=(page - 1) * limit, limit=limit)
            effective = self.reconstructor.apply(rows)
            total = self.usage_repo.count_for_discount(discount_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to list usage for discount %s", discount_id)
            return failure(ErrorCode.LIST_USAGE_FAILED, "Failed to list discount usage")

        items = [
            DiscountUsageItem(
                order_id=row.order_id,
                order_number=row.order_number,
                customer_email=row.customer_email,
                amount=result.amount,
                stored_amount=to_money(row.amount),
                reconstructed=result.reconstructed,
                code=row.code,
                created_at=row.created_at,
                order_total=to_money(row.order_total),
                currency=row.currency,
            )
            for row, result in zip(rows, effective, strict=True)
        ]
        return success(DiscountUsageResponse(items=items, total=total, page=page, limit=limit))
