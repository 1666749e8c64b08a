"""Usage ledger repository: order-level and item-level discount rows."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from promotions.models.catalog import Product, ProductVariant
from promotions.models.discount import Discount
from promotions.models.order import Order, OrderItem
from promotions.models.order_discount import OrderDiscount, OrderItemDiscount
from promotions.models.shared import utc_now

# Keeps IN (...) lists well under driver parameter limits.
ORDER_ID_BATCH_SIZE = 500


@dataclass
class UsageRow:
    """A ledger row joined to its order and discount."""

    order_id: UUID
    order_number: str
    customer_email: str | None
    amount: Decimal
    code: str | None
    created_at: datetime
    order_total: Decimal
    currency: str
    discount_type: str | None
    discount_metadata: dict[str, Any] | None


@dataclass
class PricedOrderItem:
    """An order line with the catalog price it is compared against."""

    order_id: UUID
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    base_price: Decimal | None


class UsageRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_page(self, discount_id: UUID, skip: int = 0, limit: int = 20) -> list[UsageRow]:
        """Ledger rows for one discount, newest first."""
        rows = (
            self.db.query(
                OrderDiscount.order_id,
                Order.order_number,
                Order.customer_email,
                OrderDiscount.amount,
                OrderDiscount.code,
                OrderDiscount.created_at,
                Order.total_amount,
                Order.currency,
                Discount.type,
                Discount.metadata_,
            )
            .join(Order, OrderDiscount.order_id == Order.id)
            .outerjoin(Discount, Discount.id == OrderDiscount.discount_id)
            .filter(OrderDiscount.discount_id == discount_id)
            .order_by(OrderDiscount.created_at.desc(), OrderDiscount.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return [
            UsageRow(
                order_id=row[0],
                order_number=row[1],
                customer_email=row[2],
                amount=Decimal(str(row[3])),
                code=row[4],
                created_at=row[5],
                order_total=Decimal(str(row[6] or 0)),
                currency=row[7],
                discount_type=row[8],
                discount_metadata=row[9],
            )
            for row in rows
        ]

    def count_for_discount(self, discount_id: UUID) -> int:
        """Count all ledger rows for a discount, independent of pagination."""
        return (
            self.db.query(func.count(OrderDiscount.id))
            .filter(OrderDiscount.discount_id == discount_id)
            .scalar()
            or 0
        )

    def priced_items_for_orders(self, order_ids: Collection[UUID]) -> list[PricedOrderItem]:
        """Order lines of ``order_ids`` with variant price, else product price."""
        ids = list(dict.fromkeys(order_ids))
        items: list[PricedOrderItem] = []
        for start in range(0, len(ids), ORDER_ID_BATCH_SIZE):
            batch = ids[start : start + ORDER_ID_BATCH_SIZE]
            rows = (
                self.db.query(
                    OrderItem.order_id,
                    OrderItem.quantity,
                    OrderItem.unit_price,
                    OrderItem.total_price,
                    Product.price,
                    ProductVariant.price,
                )
                .outerjoin(Product, Product.id == OrderItem.product_id)
                .outerjoin(ProductVariant, ProductVariant.id == OrderItem.variant_id)
                .filter(OrderItem.order_id.in_(batch))
                .all()
            )
            for order_id, quantity, unit_price, total_price, product_price, variant_price in rows:
                base = variant_price if variant_price is not None else product_price
                items.append(
                    PricedOrderItem(
                        order_id=order_id,
                        quantity=quantity or 0,
                        unit_price=Decimal(str(unit_price or 0)),
                        total_price=Decimal(str(total_price or 0)),
                        base_price=Decimal(str(base)) if base is not None else None,
                    )
                )
        return items

    def record_order_discount(
        self,
        order_id: UUID,
        discount_id: UUID | None,
        amount: Decimal,
        code: str | None = None,
        created_at: datetime | None = None,
    ) -> OrderDiscount:
        """Write an order-level ledger row (used by checkout and seeding)."""
        row = OrderDiscount(
            order_id=order_id,
            discount_id=discount_id,
            code=code,
            amount=amount,
            created_at=created_at or utc_now(),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def record_order_item_discount(
        self,
        order_item_id: UUID,
        discount_id: UUID | None,
        amount: Decimal,
        created_at: datetime | None = None,
    ) -> OrderItemDiscount:
        """Write an item-level ledger row."""
        row = OrderItemDiscount(
            order_item_id=order_item_id,
            discount_id=discount_id,
            amount=amount,
            created_at=created_at or utc_now(),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row
