"""Order domain types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from storefront._types import StoreId, ProductId, OrderId, UserId, Cents
from storefront.catalog import Product
from storefront.payments import PaymentMethod, PaymentStatus


# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(StrEnum):
    """
    Lifecycle:
        PENDING → PAID → SHIPPED → DELIVERED
            ↘      ↘        ↘
                  CANCELLED
    """

    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


REVENUE_STATUSES = frozenset({OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED})
"""Orders in these states count as sales."""


# ═══════════════════════════════════════════════════════════════════════════════
# Request
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineItem:
    product_id: ProductId
    quantity: int


@dataclass(frozen=True, slots=True)
class PlaceOrder:
    """
    Checkout request.

    Carries no total. The engine prices every line from the products table.
    The buyer comes from the Identity.
    """

    items: tuple[LineItem, ...]
    payment_method: PaymentMethod
    store_id: StoreId | None = None
    payment_phone_number: str | None = None


@dataclass(frozen=True, slots=True)
class OrderFilter:
    user_id: UserId | None = None
    store_id: StoreId | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderItem:
    id: int
    order_id: OrderId
    product_id: ProductId
    quantity: int
    price: Cents
    product: Product | None = None

    @property
    def subtotal(self) -> Cents:
        return self.price * self.quantity


@dataclass(frozen=True, slots=True)
class Order:
    id: OrderId
    user_id: UserId
    store_id: StoreId | None
    status: OrderStatus
    total: Cents
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_at: datetime
    items: tuple[OrderItem, ...] = field(default_factory=tuple)


__all__ = (
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "REVENUE_STATUSES",
    "LineItem",
    "PlaceOrder",
    "OrderFilter",
    "OrderItem",
    "Order",
)
