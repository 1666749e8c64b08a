"""Discount catalog service: rule validation, CRUD and eligibility preview."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promotions.core.results import ErrorCode, ServiceResult, failure, success
from promotions.models.discount import Discount, DiscountType
from promotions.models.shared import as_utc
from promotions.repositories.discount_repository import DiscountRepository
from promotions.schemas.discount import (
    DiscountCreate,
    DiscountDetailResponse,
    DiscountFilters,
    DiscountListResponse,
    DiscountMetadata,
    DiscountPreviewRequest,
    DiscountPreviewResponse,
    DiscountResponse,
    DiscountUpdate,
)
from promotions.services.eligibility import applies_to_product, check_eligibility
from promotions.services.savings import ZERO, calculate_savings, to_money

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")


def normalize_metadata(
    metadata: dict[str, Any] | None, is_automatic: bool
) -> dict[str, Any] | None:
    """Validate a metadata payload and return its stored form.

    Raises:
        ValueError: If the shape is invalid or a kind is set on a coupon.
    """
    if metadata is None:
        return None
    try:
        parsed = DiscountMetadata.model_validate(metadata)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid value")
        prefix = f"Invalid metadata {location}" if location else "Invalid metadata"
        raise ValueError(f"{prefix}: {message}") from exc
    if parsed.kind is not None and not is_automatic:
        raise ValueError("metadata.kind is only allowed on automatic discounts")
    return parsed.to_storage()


def validate_rules(
    *,
    discount_type: str,
    value: Decimal,
    is_automatic: bool,
    code: str | None,
    starts_at: datetime | None,
    ends_at: datetime | None,
) -> None:
    """Check a discount's rule shape.

    Raises:
        ValueError: On the first rule that does not hold.
    """
    if is_automatic and code:
        raise ValueError("Automatic discounts cannot have a code")

    value = Decimal(str(value))
    if discount_type == DiscountType.PERCENTAGE.value and not ZERO < value <= MAX_PERCENTAGE:
        raise ValueError("Percentage discounts need a value above 0 and at most 100")
    if discount_type == DiscountType.FIXED_AMOUNT.value and value <= ZERO:
        raise ValueError("Fixed amount discounts need a value above 0")

    if starts_at is not None and ends_at is not None and as_utc(starts_at) > as_utc(ends_at):
        raise ValueError("starts_at must be before ends_at")


class DiscountService:
    """Service for the discount catalog.

    Every public method returns a ``ServiceResult``; persistence errors are
    logged and converted to the operation's failure code.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = DiscountRepository(db)

    def list_discounts(
        self, filters: DiscountFilters, page: int = 1, limit: int = 10
    ) -> ServiceResult[DiscountListResponse]:
        try:
            items = self.repo.get_all(filters, skip=(page - 1) * limit, limit=limit)
            total = self.repo.count(filters)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to list discounts")
            return failure(ErrorCode.LIST_DISCOUNTS_FAILED, "Failed to list discounts")

        return success(
            DiscountListResponse(
                items=[DiscountResponse.model_validate(item) for item in items],
                total=total,
                page=page,
                limit=limit,
            )
        )

    def get_discount(self, discount_id: UUID) -> ServiceResult[DiscountDetailResponse]:
        try:
            discount = self.repo.get_by_id(discount_id)
            if not discount:
                return failure(ErrorCode.NOT_FOUND, "Discount not found")
            return success(self._detail(discount))
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to load discount %s", discount_id)
            return failure(ErrorCode.GET_DISCOUNT_FAILED, "Failed to load discount")

    def create_discount(self, data: DiscountCreate) -> ServiceResult[DiscountDetailResponse]:
        try:
            metadata = normalize_metadata(data.metadata, data.is_automatic)
            validate_rules(
                discount_type=data.type.value,
                value=data.value,
                is_automatic=data.is_automatic,
                code=data.code,
                starts_at=data.starts_at,
                ends_at=data.ends_at,
            )
        except ValueError as exc:
            return failure(ErrorCode.VALIDATION_FAILED, str(exc))

        try:
            if data.code and self.repo.get_by_code(data.code):
                return failure(
                    ErrorCode.DUPLICATE_CODE, f"Discount code '{data.code}' already exists"
                )
            discount = self.repo.create(data.model_copy(update={"metadata": metadata}))
            logger.info("Created discount %s", discount.id)
            return success(self._detail(discount))
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create discount")
            return failure(ErrorCode.CREATE_DISCOUNT_FAILED, "Failed to create discount")

    def update_discount(
        self, discount_id: UUID, data: DiscountUpdate
    ) -> ServiceResult[DiscountDetailResponse]:
        try:
            existing = self.repo.get_by_id(discount_id)
            if not existing:
                return failure(ErrorCode.NOT_FOUND, "Discount not found")

            fields = data.model_fields_set
            is_automatic = data.is_automatic if "is_automatic" in fields else existing.is_automatic
            code = data.code if "code" in fields else existing.code
            metadata = data.metadata if "metadata" in fields else existing.metadata_
            try:
                metadata = normalize_metadata(metadata, bool(is_automatic))
                validate_rules(
                    discount_type=data.type.value if data.type else existing.type,
                    value=data.value if data.value is not None else existing.value,
                    is_automatic=bool(is_automatic),
                    code=code,
                    starts_at=data.starts_at if "starts_at" in fields else existing.starts_at,
                    ends_at=data.ends_at if "ends_at" in fields else existing.ends_at,
                )
            except ValueError as exc:
                return failure(ErrorCode.VALIDATION_FAILED, str(exc))

            if code and "code" in fields:
                other = self.repo.get_by_code(code)
                if other and other.id != existing.id:
                    return failure(
                        ErrorCode.DUPLICATE_CODE, f"Discount code '{code}' already exists"
                    )

            if "metadata" in fields:
                data = data.model_copy(update={"metadata": metadata})
            discount = self.repo.update(discount_id, data)
            if not discount:
                return failure(ErrorCode.NOT_FOUND, "Discount not found")
            logger.info("Updated discount %s", discount_id)
            return success(self._detail(discount))
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update discount %s", discount_id)
            return failure(ErrorCode.UPDATE_DISCOUNT_FAILED, "Failed to update discount")

    def delete_discount(self, discount_id: UUID) -> ServiceResult[bool]:
        try:
            if not self.repo.delete(discount_id):
                return failure(ErrorCode.NOT_FOUND, "Discount not found")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete discount %s", discount_id)
            return failure(ErrorCode.DELETE_DISCOUNT_FAILED, "Failed to delete discount")
        logger.info("Deleted discount %s", discount_id)
        return success(True)

    def preview(
        self, discount_id: UUID, request: DiscountPreviewRequest
    ) -> ServiceResult[DiscountPreviewResponse]:
        """Evaluate a discount against a hypothetical cart without touching counters."""
        try:
            discount = self.repo.get_by_id(discount_id)
            if not discount:
                return failure(ErrorCode.NOT_FOUND, "Discount not found")

            applies = None
            if request.product_id is not None:
                product_ids, category_ids = self.repo.get_target_ids(discount_id)
                applies = applies_to_product(
                    discount,
                    request.product_id,
                    product_ids,
                    category_ids,
                    request.category_ids,
                )
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to preview discount %s", discount_id)
            return failure(ErrorCode.GET_DISCOUNT_FAILED, "Failed to load discount")

        eligibility = check_eligibility(discount, subtotal=request.subtotal)
        if eligibility.eligible and applies is not False:
            savings = calculate_savings(
                discount.type, discount.value, request.subtotal, request.shipping_amount
            )
            subtotal_discount = savings.subtotal_discount
            shipping_discount = savings.shipping_discount
            total_discount = savings.total
        else:
            subtotal_discount = shipping_discount = total_discount = to_money(ZERO)

        return success(
            DiscountPreviewResponse(
                eligible=eligibility.eligible,
                reasons=[reason.value for reason in eligibility.reasons],
                active_now=eligibility.active_now,
                remaining_uses=eligibility.remaining_uses,
                applies_to_product=applies,
                subtotal_discount=subtotal_discount,
                shipping_discount=shipping_discount,
                total_discount=total_discount,
            )
        )

    def _detail(self, discount: Discount) -> DiscountDetailResponse:
        product_ids, category_ids = self.repo.get_target_ids(discount.id)
        return DiscountDetailResponse.model_validate(discount).model_copy(
            update={"product_ids": product_ids, "category_ids": category_ids}
        )
