"""Catalog tables owned by the product catalog; read here for base prices."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from promotions.core.database import Base
from promotions.models.shared import UUIDType, generate_uuid, utc_now


class Category(Base):
    __tablename__ = "categories"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Product(Base):
    __tablename__ = "products"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(
        UUIDType, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at = Column(DateTime(timezone=True), default=utc_now)


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
