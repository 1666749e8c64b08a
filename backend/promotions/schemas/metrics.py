from decimal import Decimal

from pydantic import BaseModel

from promotions.services.promotion_kind import PromotionKind


class DiscountTypeCount(BaseModel):
    type: str
    count: int


class PromotionKindBreakdown(BaseModel):
    kind: PromotionKind
    label: str
    discount_count: int
    usage_count: int
    total_amount: Decimal


class DiscountMetricsResponse(BaseModel):
    total_discounts: int
    draft_count: int
    active_count: int
    expired_count: int
    archived_count: int
    active_now_count: int
    total_usage: int
    total_discount_given: Decimal
    total_discount_given_30d: Decimal
    currency: str
    by_type: list[DiscountTypeCount]
    by_kind: list[PromotionKindBreakdown]
