"""Usage ledger: discount amounts recorded against orders and order items."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from promotions.core.database import Base
from promotions.models.shared import UUIDType, generate_uuid, utc_now


class OrderDiscount(Base):
    """One row per discount applied to an order.

    ``amount`` may be 0 when the discount showed up as altered item prices
    instead of a deduction; see the implied-savings reconstructor.
    """

    __tablename__ = "order_discounts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(
        UUIDType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    discount_id = Column(
        UUIDType, ForeignKey("discounts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    code = Column(String(50), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)


class OrderItemDiscount(Base):
    __tablename__ = "order_item_discounts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_item_id = Column(
        UUIDType, ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    discount_id = Column(
        UUIDType, ForeignKey("discounts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
