"""Tests for promotion kind classification and the metadata schema."""

import pytest
from pydantic import ValidationError

from promotions.schemas.discount import DiscountMetadata
from promotions.services.promotion_kind import (
    Promotion,
    PromotionKind,
    bundle_required_qty,
    classify_promotion,
)


class TestClassifyPromotion:
    def test_non_automatic_is_coupon_regardless_of_metadata(self):
        metadata = {"kind": "deal", "offerKind": "bxgy_generic"}
        assert classify_promotion(False, metadata) == Promotion(PromotionKind.COUPON)

    @pytest.mark.parametrize(
        ("metadata", "expected"),
        [
            (None, PromotionKind.SCHEDULED_OFFER),
            ({}, PromotionKind.SCHEDULED_OFFER),
            ({"kind": "offer", "offerKind": "standard"}, PromotionKind.SCHEDULED_OFFER),
            ({"kind": "deal", "offerKind": "bxgy_generic"}, PromotionKind.BXGY_GENERIC),
            ({"kind": "deal", "offerKind": "bxgy_bundle"}, PromotionKind.BXGY_BUNDLE),
            ({"kind": "deal"}, PromotionKind.BXGY_GENERIC),
        ],
    )
    def test_automatic_kinds(self, metadata, expected):
        assert classify_promotion(True, metadata).kind == expected

    def test_bundle_offer_carries_required_qty(self):
        metadata = {"kind": "offer", "offerKind": "bundle", "bundle": {"requiredQty": 3}}
        assert classify_promotion(True, metadata) == Promotion(
            PromotionKind.BUNDLE_OFFER, required_qty=3
        )

    def test_labels(self):
        assert [kind.label for kind in PromotionKind] == [
            "Coupons",
            "Scheduled Offers",
            "Bundle Offers",
            "Buy X Get Y",
            "BXGY Bundle",
        ]


@pytest.mark.parametrize(
    ("metadata", "expected"),
    [
        ({"bundle": {"requiredQty": 2}}, 2),
        ({"bundle": {"requiredQty": "2"}}, None),
        ({"bundle": {"requiredQty": True}}, None),
        ({"bundle": None}, None),
        (None, None),
    ],
)
def test_bundle_required_qty(metadata, expected):
    assert bundle_required_qty(metadata) == expected


class TestDiscountMetadata:
    def test_preserves_unknown_keys(self):
        parsed = DiscountMetadata.model_validate(
            {"kind": "deal", "offerKind": "bxgy_generic", "bxgy": {"buyQty": 2, "getQty": 1}}
        )
        assert parsed.to_storage() == {
            "kind": "deal",
            "offerKind": "bxgy_generic",
            "bxgy": {"buyQty": 2, "getQty": 1},
        }

    def test_bundle_requires_positive_qty(self):
        with pytest.raises(ValidationError):
            DiscountMetadata.model_validate(
                {"kind": "offer", "offerKind": "bundle", "bundle": {"requiredQty": 0}}
            )

    def test_bundle_offer_round_trip(self):
        stored = DiscountMetadata.model_validate(
            {"kind": "offer", "offerKind": "bundle", "bundle": {"requiredQty": 4}}
        ).to_storage()
        assert stored == {"kind": "offer", "offerKind": "bundle", "bundle": {"requiredQty": 4}}

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            DiscountMetadata.model_validate({"kind": "raffle"})

    def test_empty_metadata_is_allowed(self):
        assert DiscountMetadata.model_validate({}).to_storage() == {}
