"""Order tables written by checkout; read-only from the promotions core."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from promotions.core.database import Base
from promotions.models.shared import UUIDType, generate_uuid, utc_now


class Order(Base):
    __tablename__ = "orders"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_number = Column(String(50), unique=True, nullable=False)
    customer_email = Column(String(255), nullable=True)
    status = Column(String(30), nullable=False, default="pending")
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="CAD")
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)


class OrderItem(Base):
    """A purchased line. ``unit_price == total_price == 0`` marks a gift line."""

    __tablename__ = "order_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(
        UUIDType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    variant_id = Column(
        UUIDType, ForeignKey("product_variants.id", ondelete="SET NULL"), nullable=True
    )
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
