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
from promotions.schemas.metrics import (
    DiscountMetricsResponse,
    DiscountTypeCount,
    PromotionKindBreakdown,
)
from promotions.schemas.usage import DiscountUsageItem, DiscountUsageResponse

__all__ = [
    "DiscountCreate",
    "DiscountDetailResponse",
    "DiscountFilters",
    "DiscountListResponse",
    "DiscountMetadata",
    "DiscountMetricsResponse",
    "DiscountPreviewRequest",
    "DiscountPreviewResponse",
    "DiscountResponse",
    "DiscountTypeCount",
    "DiscountUpdate",
    "DiscountUsageItem",
    "DiscountUsageResponse",
    "PromotionKindBreakdown",
]
