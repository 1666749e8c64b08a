"""Discount schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from promotions.core.sorting import DiscountSort
from promotions.models.discount import DiscountScope, DiscountStatus, DiscountType
from promotions.models.shared import as_utc
from promotions.services.promotion_kind import (
    BXGY_OFFER_KINDS,
    MetadataKind,
    OfferKind,
    PromotionKind,
    classify_promotion,
)

_MONEY = {"max_digits": 10, "decimal_places": 2}


def normalize_code(value: Any) -> Any:
    """Uppercase a coupon code; blank codes become None."""
    if value is None:
        return None
    code = str(value).strip()
    if not code:
        return None
    return code.upper()


def _normalize_timestamp(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


CouponCode = Annotated[str | None, BeforeValidator(normalize_code)]
UtcDatetime = Annotated[datetime | None, AfterValidator(_normalize_timestamp)]


class BundleMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    required_qty: int | None = Field(default=None, ge=1, alias="requiredQty")


class DiscountMetadata(BaseModel):
    """Shape check for the free-form ``metadata`` column.

    Unknown keys (e.g. ``bxgy.buyQty``) are kept as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    kind: MetadataKind | None = None
    offer_kind: OfferKind | None = Field(default=None, alias="offerKind")
    bundle: BundleMetadata | None = None

    @model_validator(mode="after")
    def _check_kind_combination(self) -> "DiscountMetadata":
        if self.kind is None:
            if self.offer_kind is not None:
                raise ValueError("metadata.offerKind requires metadata.kind")
            return self
        if self.kind == MetadataKind.OFFER:
            if self.offer_kind is None:
                self.offer_kind = OfferKind.STANDARD
            elif self.offer_kind.value in BXGY_OFFER_KINDS:
                raise ValueError("Offers cannot use a buy-x-get-y offerKind")
        elif self.offer_kind is None or self.offer_kind.value not in BXGY_OFFER_KINDS:
            raise ValueError("Deals require offerKind bxgy_generic or bxgy_bundle")
        if self.offer_kind == OfferKind.BUNDLE and (
            self.bundle is None or self.bundle.required_qty is None
        ):
            raise ValueError("Bundle offers require metadata.bundle.requiredQty")
        return self

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DiscountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    code: CouponCode = Field(default=None, max_length=50)
    type: DiscountType
    value: Decimal = Field(default=Decimal("0"), ge=0, **_MONEY)
    scope: DiscountScope = DiscountScope.ALL
    usage_limit: int | None = Field(default=None, gt=0)
    starts_at: UtcDatetime = None
    ends_at: UtcDatetime = None
    min_subtotal: Decimal | None = Field(default=None, ge=0, **_MONEY)
    is_automatic: bool = False
    status: DiscountStatus = DiscountStatus.DRAFT
    product_ids: list[UUID] | None = None
    category_ids: list[UUID] | None = None
    metadata: dict[str, Any] | None = None


class DiscountUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: CouponCode = Field(default=None, max_length=50)
    type: DiscountType | None = None
    value: Decimal | None = Field(default=None, ge=0, **_MONEY)
    scope: DiscountScope | None = None
    usage_limit: int | None = Field(default=None, gt=0)
    starts_at: UtcDatetime = None
    ends_at: UtcDatetime = None
    min_subtotal: Decimal | None = Field(default=None, ge=0, **_MONEY)
    is_automatic: bool | None = None
    status: DiscountStatus | None = None
    product_ids: list[UUID] | None = None
    category_ids: list[UUID] | None = None
    metadata: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "DiscountUpdate":
        for field in ("name", "type", "value", "scope", "is_automatic", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class DiscountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    code: str | None = None
    type: str
    value: Decimal
    scope: str
    usage_limit: int | None = None
    usage_count: int
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    min_subtotal: Decimal | None = None
    is_automatic: bool
    status: str
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("metadata_", "metadata")
    )
    created_at: datetime
    updated_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def promotion_kind(self) -> PromotionKind:
        return classify_promotion(self.is_automatic, self.metadata).kind


class DiscountDetailResponse(DiscountResponse):
    product_ids: list[UUID] = []
    category_ids: list[UUID] = []


class DiscountListResponse(BaseModel):
    items: list[DiscountResponse]
    total: int
    page: int
    limit: int


class DiscountFilters(BaseModel):
    """Predicates shared by discount listing and metrics. All of them AND together."""

    q: str | None = None
    status: DiscountStatus | None = None
    type: DiscountType | None = None
    scope: DiscountScope | None = None
    kind: PromotionKind | None = None
    is_automatic: bool | None = None
    date_from: UtcDatetime = None
    date_to: UtcDatetime = None
    active_now: bool = False
    sort: DiscountSort | None = None


class DiscountPreviewRequest(BaseModel):
    subtotal: Decimal = Field(ge=0, **_MONEY)
    shipping_amount: Decimal = Field(default=Decimal("0"), ge=0, **_MONEY)
    product_id: UUID | None = None
    category_ids: list[UUID] = []


class DiscountPreviewResponse(BaseModel):
    eligible: bool
    reasons: list[str]
    active_now: bool
    remaining_uses: int | None = None
    applies_to_product: bool | None = None
    subtotal_discount: Decimal
    shipping_discount: Decimal
    total_discount: Decimal
