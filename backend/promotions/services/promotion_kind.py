"""Promotion kinds derived from a discount's automatic flag and metadata.

Discount metadata is stored as free-form JSON, for example::

    {"kind": "deal", "offerKind": "bxgy_bundle", "bundle": {"requiredQty": 3}}

This module turns that shape into a closed set of kinds so callers can match
on ``PromotionKind`` instead of probing nested optional keys.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MetadataKind(str, Enum):
    OFFER = "offer"
    DEAL = "deal"


class OfferKind(str, Enum):
    STANDARD = "standard"
    BUNDLE = "bundle"
    BXGY_GENERIC = "bxgy_generic"
    BXGY_BUNDLE = "bxgy_bundle"


BXGY_OFFER_KINDS = frozenset({OfferKind.BXGY_GENERIC.value, OfferKind.BXGY_BUNDLE.value})


class PromotionKind(str, Enum):
    COUPON = "coupon"
    SCHEDULED_OFFER = "scheduled_offer"
    BUNDLE_OFFER = "bundle_offer"
    BXGY_GENERIC = "bxgy_generic"
    BXGY_BUNDLE = "bxgy_bundle"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    PromotionKind.COUPON: "Coupons",
    PromotionKind.SCHEDULED_OFFER: "Scheduled Offers",
    PromotionKind.BUNDLE_OFFER: "Bundle Offers",
    PromotionKind.BXGY_GENERIC: "Buy X Get Y",
    PromotionKind.BXGY_BUNDLE: "BXGY Bundle",
}


@dataclass(frozen=True)
class Promotion:
    kind: PromotionKind
    required_qty: int | None = None


def metadata_value(metadata: Mapping[str, Any] | None, key: str) -> str:
    """Read a top-level string key from discount metadata, "" when absent."""
    if not isinstance(metadata, Mapping):
        return ""
    value = metadata.get(key)
    return value if isinstance(value, str) else ""


def bundle_required_qty(metadata: Mapping[str, Any] | None) -> int | None:
    if not isinstance(metadata, Mapping):
        return None
    bundle = metadata.get("bundle")
    if not isinstance(bundle, Mapping):
        return None
    qty = bundle.get("requiredQty")
    if isinstance(qty, bool) or not isinstance(qty, int):
        return None
    return qty


def classify_promotion(is_automatic: bool, metadata: Mapping[str, Any] | None) -> Promotion:
    """Map a discount to its promotion kind.

    Non-automatic discounts are always coupons. Automatic discounts without a
    metadata kind are treated as scheduled offers.
    """
    if not is_automatic:
        return Promotion(PromotionKind.COUPON)

    kind = metadata_value(metadata, "kind")
    offer_kind = metadata_value(metadata, "offerKind")

    if kind == MetadataKind.DEAL.value:
        if offer_kind == OfferKind.BXGY_BUNDLE.value:
            return Promotion(PromotionKind.BXGY_BUNDLE)
        return Promotion(PromotionKind.BXGY_GENERIC)

    if offer_kind == OfferKind.BUNDLE.value:
        return Promotion(PromotionKind.BUNDLE_OFFER, required_qty=bundle_required_qty(metadata))

    return Promotion(PromotionKind.SCHEDULED_OFFER)
