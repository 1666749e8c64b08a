"""Discount usage ledger schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class DiscountUsageItem(BaseModel):
    order_id: UUID
    order_number: str
    customer_email: str | None = None
    amount: Decimal
    stored_amount: Decimal
    reconstructed: bool = False
    code: str | None = None
    created_at: datetime
    order_total: Decimal
    currency: str


class DiscountUsageResponse(BaseModel):
    items: list[DiscountUsageItem]
    total: int
    page: int
    limit: int
