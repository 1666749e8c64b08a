from promotions.models.audit_log import AuditLog
from promotions.models.catalog import Category, Product, ProductVariant
from promotions.models.discount import (
    Discount,
    DiscountCategory,
    DiscountProduct,
    DiscountScope,
    DiscountStatus,
    DiscountType,
)
from promotions.models.order import Order, OrderItem
from promotions.models.order_discount import OrderDiscount, OrderItemDiscount
from promotions.models.setting import Setting

__all__ = [
    "AuditLog",
    "Category",
    "Discount",
    "DiscountCategory",
    "DiscountProduct",
    "DiscountScope",
    "DiscountStatus",
    "DiscountType",
    "Order",
    "OrderDiscount",
    "OrderItem",
    "OrderItemDiscount",
    "Product",
    "ProductVariant",
    "Setting",
]
