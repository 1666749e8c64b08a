"""Discount repository for data access."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, func, not_, or_
from sqlalchemy.orm import Session

from promotions.core.database import transaction
from promotions.core.sorting import apply_sort
from promotions.models.discount import (
    Discount,
    DiscountCategory,
    DiscountProduct,
    DiscountScope,
)
from promotions.schemas.discount import DiscountCreate, DiscountFilters, DiscountUpdate
from promotions.services.eligibility import active_now_clause
from promotions.services.promotion_kind import (
    BXGY_OFFER_KINDS,
    MetadataKind,
    OfferKind,
    PromotionKind,
)


def _metadata_key(key: str) -> Any:
    return func.coalesce(Discount.metadata_[key].as_string(), "")


def kind_clauses(kind: PromotionKind) -> list[Any]:
    """Predicates selecting discounts of one promotion kind.

    Mirrors ``classify_promotion`` so SQL filters and Python classification agree.
    """
    if kind == PromotionKind.COUPON:
        return [Discount.is_automatic.is_(False)]

    meta_kind = _metadata_key("kind")
    offer_kind = _metadata_key("offerKind")
    is_deal = meta_kind == MetadataKind.DEAL.value
    clauses: list[Any] = [Discount.is_automatic.is_(True)]

    if kind == PromotionKind.SCHEDULED_OFFER:
        clauses += [not_(is_deal), offer_kind != OfferKind.BUNDLE.value]
    elif kind == PromotionKind.BUNDLE_OFFER:
        clauses += [not_(is_deal), offer_kind == OfferKind.BUNDLE.value]
    elif kind == PromotionKind.BXGY_GENERIC:
        clauses += [is_deal, offer_kind != OfferKind.BXGY_BUNDLE.value]
    elif kind == PromotionKind.BXGY_BUNDLE:
        clauses += [is_deal, offer_kind == OfferKind.BXGY_BUNDLE.value]
    return clauses


def discount_filter_clauses(filters: DiscountFilters, now: datetime | None = None) -> list[Any]:
    """Build the AND-ed predicate list for listing and metrics queries."""
    clauses: list[Any] = []

    if filters.q:
        like = f"%{filters.q}%"
        clauses.append(or_(Discount.name.ilike(like), Discount.code.ilike(like)))
    if filters.status:
        clauses.append(Discount.status == filters.status.value)

    bxgy_kind = filters.kind in (PromotionKind.BXGY_GENERIC, PromotionKind.BXGY_BUNDLE)
    if filters.type and not bxgy_kind:
        clauses.append(Discount.type == filters.type.value)
        if filters.kind is None:
            # BXGY deals are stored with a nominal type; keep them out of type slices.
            clauses.append(
                not_(
                    and_(
                        _metadata_key("kind") == MetadataKind.DEAL.value,
                        _metadata_key("offerKind").in_(sorted(BXGY_OFFER_KINDS)),
                    )
                )
            )

    if filters.scope:
        clauses.append(Discount.scope == filters.scope.value)
    if filters.kind:
        clauses.extend(kind_clauses(filters.kind))
    if filters.is_automatic is not None:
        clauses.append(Discount.is_automatic.is_(filters.is_automatic))
    if filters.date_from:
        clauses.append(Discount.created_at >= filters.date_from)
    if filters.date_to:
        clauses.append(Discount.created_at <= filters.date_to)
    if filters.active_now:
        clauses.append(active_now_clause(now))
    return clauses


def _unique(ids: Iterable[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))


class DiscountRepository:
    """Repository for Discount model and its target associations."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        filters: DiscountFilters,
        skip: int = 0,
        limit: int = 10,
    ) -> list[Discount]:
        """Get discounts matching ``filters`` in the requested sort order."""
        query = self.db.query(Discount).filter(*discount_filter_clauses(filters))
        query = apply_sort(query, Discount, filters.sort)
        return query.offset(skip).limit(limit).all()

    def count(self, filters: DiscountFilters) -> int:
        return (
            self.db.query(func.count(Discount.id))
            .filter(*discount_filter_clauses(filters))
            .scalar()
            or 0
        )

    def get_by_id(self, discount_id: UUID) -> Discount | None:
        """Get a discount by ID."""
        return self.db.query(Discount).filter(Discount.id == discount_id).first()

    def get_by_code(self, code: str) -> Discount | None:
        """Get a discount by (uppercased) code."""
        return self.db.query(Discount).filter(Discount.code == code).first()

    def get_target_ids(self, discount_id: UUID) -> tuple[list[UUID], list[UUID]]:
        """Return the (product_ids, category_ids) a discount targets."""
        product_ids = [
            row.product_id
            for row in self.db.query(DiscountProduct.product_id).filter(
                DiscountProduct.discount_id == discount_id
            )
        ]
        category_ids = [
            row.category_id
            for row in self.db.query(DiscountCategory.category_id).filter(
                DiscountCategory.discount_id == discount_id
            )
        ]
        return sorted(product_ids, key=str), sorted(category_ids, key=str)

    def create(self, data: DiscountCreate) -> Discount:
        """Create a discount plus the target rows its scope uses."""
        discount = Discount(
            name=data.name,
            code=data.code,
            type=data.type.value,
            value=data.value,
            scope=data.scope.value,
            usage_limit=data.usage_limit,
            starts_at=data.starts_at,
            ends_at=data.ends_at,
            min_subtotal=data.min_subtotal,
            is_automatic=data.is_automatic,
            status=data.status.value,
            metadata_=data.metadata,
        )
        with transaction(self.db):
            self.db.add(discount)
            self.db.flush()
            if data.scope == DiscountScope.PRODUCTS and data.product_ids:
                self._insert_products(discount.id, data.product_ids)
            if data.scope == DiscountScope.CATEGORIES and data.category_ids:
                self._insert_categories(discount.id, data.category_ids)
        self.db.refresh(discount)
        return discount

    def update(self, discount_id: UUID, data: DiscountUpdate) -> Discount | None:
        """Apply a partial update.

        Target lists present in ``data`` replace the stored set entirely.
        Targets the resulting scope no longer uses are cleared. The row update
        and the replacement commit together.
        """
        discount = self.get_by_id(discount_id)
        if not discount:
            return None

        update_data = data.model_dump(
            exclude_unset=True, exclude={"product_ids", "category_ids", "metadata"}
        )
        for key in ("type", "scope", "status"):
            if update_data.get(key) is not None:
                update_data[key] = update_data[key].value

        with transaction(self.db):
            for key, value in update_data.items():
                setattr(discount, key, value)
            if "metadata" in data.model_fields_set:
                discount.metadata_ = data.metadata
            self.db.flush()

            if discount.scope == DiscountScope.PRODUCTS.value:
                if data.product_ids is not None:
                    self._replace_products(discount.id, data.product_ids)
            else:
                self._replace_products(discount.id, [])

            if discount.scope == DiscountScope.CATEGORIES.value:
                if data.category_ids is not None:
                    self._replace_categories(discount.id, data.category_ids)
            else:
                self._replace_categories(discount.id, [])

        self.db.refresh(discount)
        return discount

    def delete(self, discount_id: UUID) -> bool:
        """Hard-delete a discount; target rows go with it."""
        discount = self.get_by_id(discount_id)
        if not discount:
            return False

        with transaction(self.db):
            self.db.delete(discount)
        return True

    def _insert_products(self, discount_id: UUID, product_ids: Iterable[UUID]) -> None:
        self.db.add_all(
            DiscountProduct(discount_id=discount_id, product_id=pid) for pid in _unique(product_ids)
        )

    def _insert_categories(self, discount_id: UUID, category_ids: Iterable[UUID]) -> None:
        self.db.add_all(
            DiscountCategory(discount_id=discount_id, category_id=cid)
            for cid in _unique(category_ids)
        )

    def _replace_products(self, discount_id: UUID, product_ids: list[UUID]) -> None:
        self.db.query(DiscountProduct).filter(DiscountProduct.discount_id == discount_id).delete(
            synchronize_session=False
        )
        self.db.flush()
        self._insert_products(discount_id, product_ids)

    def _replace_categories(self, discount_id: UUID, category_ids: list[UUID]) -> None:
        self.db.query(DiscountCategory).filter(
            DiscountCategory.discount_id == discount_id
        ).delete(synchronize_session=False)
        self.db.flush()
        self._insert_categories(discount_id, category_ids)
