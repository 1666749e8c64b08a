"""Discount admin API endpoints."""

from datetime import datetime
from typing import TypeVar
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from promotions.core.auth import DISCOUNTS_MANAGE, DISCOUNTS_VIEW, Actor, require_permission
from promotions.core.config import settings
from promotions.core.database import get_db
from promotions.core.results import ErrorCode, ServiceResult
from promotions.core.sorting import DiscountSort
from promotions.models.discount import DiscountScope, DiscountStatus, DiscountType
from promotions.schemas.discount import (
    DiscountCreate,
    DiscountDetailResponse,
    DiscountFilters,
    DiscountListResponse,
    DiscountPreviewRequest,
    DiscountPreviewResponse,
    DiscountUpdate,
)
from promotions.schemas.metrics import DiscountMetricsResponse
from promotions.schemas.usage import DiscountUsageResponse
from promotions.services.audit_service import AuditService
from promotions.services.discount_service import DiscountService
from promotions.services.metrics_service import MetricsService
from promotions.services.promotion_kind import PromotionKind
from promotions.services.usage_service import UsageService

T = TypeVar("T")

AUDIT_RESOURCE = "discount"

router = APIRouter()

_HTTP_STATUS = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.DUPLICATE_CODE: 409,
}


def unwrap(result: ServiceResult[T]) -> T:
    """Return the result's data or raise the matching HTTP error."""
    if result.error is not None:
        raise HTTPException(
            status_code=_HTTP_STATUS.get(result.error.code, 400),
            detail={"code": result.error.code.value, "message": result.error.message},
        )
    return result.data  # type: ignore[return-value]


def discount_filters(
    q: str | None = Query(default=None, max_length=100),
    status: DiscountStatus | None = Query(default=None),
    discount_type: DiscountType | None = Query(default=None, alias="type"),
    scope: DiscountScope | None = Query(default=None),
    kind: PromotionKind | None = Query(default=None),
    is_automatic: bool | None = Query(default=None, alias="isAutomatic"),
    date_from: datetime | None = Query(default=None, alias="dateFrom"),
    date_to: datetime | None = Query(default=None, alias="dateTo"),
    active_now: bool = Query(default=False, alias="activeNow"),
    sort: DiscountSort | None = Query(default=None),
) -> DiscountFilters:
    return DiscountFilters(
        q=q.strip() if q and q.strip() else None,
        status=status,
        type=discount_type,
        scope=scope,
        kind=kind,
        is_automatic=is_automatic,
        date_from=date_from,
        date_to=date_to,
        active_now=active_now,
        sort=sort,
    )


@router.get(
    "/",
    response_model=DiscountListResponse,
    summary="List discounts",
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Forbidden"}},
)
async def list_discounts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DISCOUNTS_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    filters: DiscountFilters = Depends(discount_filters),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_VIEW)),
) -> DiscountListResponse:
    """List discounts matching all given filters."""
    return unwrap(DiscountService(db).list_discounts(filters, page=page, limit=limit))


@router.get(
    "/metrics",
    response_model=DiscountMetricsResponse,
    summary="Discount metrics",
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Forbidden"}},
)
async def get_discount_metrics(
    filters: DiscountFilters = Depends(discount_filters),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_VIEW)),
) -> DiscountMetricsResponse:
    """Status counts, usage and discount totals under the listing filters."""
    return unwrap(MetricsService(db).get_metrics(filters))


@router.get(
    "/{discount_id}",
    response_model=DiscountDetailResponse,
    summary="Get discount",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Discount not found"},
    },
)
async def get_discount(
    discount_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_VIEW)),
) -> DiscountDetailResponse:
    return unwrap(DiscountService(db).get_discount(discount_id))


@router.post(
    "/",
    response_model=DiscountDetailResponse,
    status_code=201,
    summary="Create discount",
    responses={
        400: {"description": "Invalid discount rules"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        409: {"description": "Discount code already exists"},
        422: {"description": "Validation error"},
    },
)
async def create_discount(
    data: DiscountCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_MANAGE)),
) -> DiscountDetailResponse:
    """Create a discount and its product or category targets."""
    discount = unwrap(DiscountService(db).create_discount(data))
    AuditService(db).record(
        "create", AUDIT_RESOURCE, discount.id, actor, data.model_dump(mode="json")
    )
    return discount


@router.put(
    "/{discount_id}",
    response_model=DiscountDetailResponse,
    summary="Update discount",
    responses={
        400: {"description": "Invalid discount rules"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Discount not found"},
        409: {"description": "Discount code already exists"},
        422: {"description": "Validation error"},
    },
)
async def update_discount(
    discount_id: UUID,
    data: DiscountUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_MANAGE)),
) -> DiscountDetailResponse:
    """Partially update a discount. Target lists sent here replace the stored ones."""
    discount = unwrap(DiscountService(db).update_discount(discount_id, data))
    AuditService(db).record(
        "update",
        AUDIT_RESOURCE,
        discount_id,
        actor,
        data.model_dump(mode="json", exclude_unset=True),
    )
    return discount


@router.delete(
    "/{discount_id}",
    status_code=204,
    summary="Delete discount",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Discount not found"},
    },
)
async def delete_discount(
    discount_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_MANAGE)),
) -> None:
    unwrap(DiscountService(db).delete_discount(discount_id))
    AuditService(db).record("delete", AUDIT_RESOURCE, discount_id, actor)


@router.get(
    "/{discount_id}/usage",
    response_model=DiscountUsageResponse,
    summary="List discount usage",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Discount not found"},
    },
)
async def list_discount_usage(
    discount_id: UUID,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.USAGE_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_VIEW)),
) -> DiscountUsageResponse:
    """Orders that used this discount, newest first."""
    return unwrap(UsageService(db).list_usage(discount_id, page=page, limit=limit))


@router.post(
    "/{discount_id}/preview",
    response_model=DiscountPreviewResponse,
    summary="Preview discount eligibility",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Discount not found"},
    },
)
async def preview_discount(
    discount_id: UUID,
    data: DiscountPreviewRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission(DISCOUNTS_VIEW)),
) -> DiscountPreviewResponse:
    """Check eligibility and savings for a hypothetical cart. Nothing is written."""
    return unwrap(DiscountService(db).preview(discount_id, data))
