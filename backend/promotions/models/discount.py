"""Discount model: promotion rules and their target associations."""

from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from promotions.core.database import Base
from promotions.models.shared import UUIDType, generate_uuid, utc_now


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class DiscountScope(str, Enum):
    ALL = "all"
    PRODUCTS = "products"
    CATEGORIES = "categories"
    COLLECTIONS = "collections"
    CUSTOMER_GROUPS = "customer_groups"


class DiscountStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    EXPIRED = "expired"
    ARCHIVED = "archived"


class Discount(Base):
    """A promotion rule.

    Automatic discounts (``is_automatic``) never carry a code. The sub-kind of
    an automatic discount (scheduled offer, bundle, BXGY deal) lives in
    ``metadata``.
    """

    __tablename__ = "discounts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    code = Column(String(50), unique=True, index=True, nullable=True)

    type = Column(String(20), nullable=False)
    value = Column(Numeric(10, 2), nullable=False, default=0)
    scope = Column(String(20), nullable=False, default=DiscountScope.ALL.value)

    usage_limit = Column(Integer, nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)

    starts_at = Column(DateTime(timezone=True), nullable=True, index=True)
    ends_at = Column(DateTime(timezone=True), nullable=True, index=True)
    min_subtotal = Column(Numeric(10, 2), nullable=True)

    is_automatic = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=DiscountStatus.DRAFT.value, index=True)
    metadata_ = Column("metadata", JSON(none_as_null=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    products = relationship("DiscountProduct", cascade="all, delete-orphan")
    categories = relationship("DiscountCategory", cascade="all, delete-orphan")


class DiscountProduct(Base):
    __tablename__ = "discount_products"

    discount_id = Column(
        UUIDType, ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True
    )
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )


class DiscountCategory(Base):
    __tablename__ = "discount_categories"

    discount_id = Column(
        UUIDType, ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True
    )
    category_id = Column(
        UUIDType, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True
    )
