"""
Wire schemas. JSON in, domain out, and back.

Request models implement ``to_domain()``; response models implement
``from_domain()``. Field names are camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront import catalog as C
from storefront import orders as O
from storefront.analytics import SalesSummary
from storefront.inventory import InventoryLogEntry


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Stores
# ═══════════════════════════════════════════════════════════════════════════════


class StoreIn(Schema):
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=100)
    color: str = "#000000"
    is_active: bool = True

    def to_domain(self) -> C.NewStore:
        return C.NewStore(
            name=self.name,
            slug=self.slug,
            color=self.color,
            is_active=self.is_active,
        )


class StorePatchIn(Schema):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = None
    is_active: bool | None = None

    def to_domain(self) -> C.StoreChanges:
        return C.StoreChanges(**self.model_dump(exclude_unset=True))


class StoreOut(Schema):
    id: int
    name: str
    slug: str
    color: str
    is_active: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, dom: C.Store) -> Self:
        return cls(
            id=dom.id,
            name=dom.name,
            slug=dom.slug,
            color=dom.color,
            is_active=dom.is_active,
            created_at=dom.created_at,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


class ProductIn(Schema):
    store_id: int | None = None
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    price: int = Field(ge=0)
    category: str = Field(min_length=1, max_length=50)
    stock: int = Field(default=0, ge=0)
    image_url: str = ""

    def to_domain(self) -> C.NewProduct:
        return C.NewProduct(
            store_id=self.store_id,
            name=self.name,
            description=self.description,
            price=self.price,
            category=self.category,
            stock=self.stock,
            image_url=self.image_url,
        )


class ProductPatchIn(Schema):
    store_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: int | None = Field(default=None, ge=0)
    category: str | None = Field(default=None, min_length=1, max_length=50)
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = None

    def to_domain(self) -> C.ProductChanges:
        return C.ProductChanges(**self.model_dump(exclude_unset=True))


class ProductOut(Schema):
    id: int
    store_id: int | None
    name: str
    description: str
    price: int
    category: str
    stock: int
    image_url: str
    created_at: datetime

    @classmethod
    def from_domain(cls, dom: C.Product) -> Self:
        return cls(
            id=dom.id,
            store_id=dom.store_id,
            name=dom.name,
            description=dom.description,
            price=dom.price,
            category=dom.category,
            stock=dom.stock,
            image_url=dom.image_url,
            created_at=dom.created_at,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class LineItemIn(Schema):
    product_id: int
    quantity: int = Field(ge=1)


class PlaceOrderIn(Schema):
    """Any client-sent ``total`` is ignored."""

    store_id: int | None = None
    items: list[LineItemIn] = Field(min_length=1)
    payment_method: O.PaymentMethod
    payment_phone_number: str | None = None

    def to_domain(self) -> O.PlaceOrder:
        return O.PlaceOrder(
            items=tuple(O.LineItem(i.product_id, i.quantity) for i in self.items),
            payment_method=self.payment_method,
            store_id=self.store_id,
            payment_phone_number=self.payment_phone_number,
        )


class StatusIn(Schema):
    status: O.OrderStatus


class OrderItemOut(Schema):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: int
    product: ProductOut | None = None

    @classmethod
    def from_domain(cls, dom: O.OrderItem) -> Self:
        return cls(
            id=dom.id,
            order_id=dom.order_id,
            product_id=dom.product_id,
            quantity=dom.quantity,
            price=dom.price,
            product=ProductOut.from_domain(dom.product) if dom.product else None,
        )


class OrderOut(Schema):
    id: int
    user_id: str
    store_id: int | None
    status: O.OrderStatus
    total: int
    payment_method: O.PaymentMethod
    payment_status: O.PaymentStatus
    created_at: datetime
    items: list[OrderItemOut]

    @classmethod
    def from_domain(cls, dom: O.Order) -> Self:
        return cls(
            id=dom.id,
            user_id=dom.user_id,
            store_id=dom.store_id,
            status=dom.status,
            total=dom.total,
            payment_method=dom.payment_method,
            payment_status=dom.payment_status,
            created_at=dom.created_at,
            items=[OrderItemOut.from_domain(i) for i in dom.items],
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Analytics / Inventory
# ═══════════════════════════════════════════════════════════════════════════════


class CategorySalesOut(Schema):
    category: str
    sales: int


class SalesOut(Schema):
    total_sales: int
    count: int
    by_category: list[CategorySalesOut]

    @classmethod
    def from_domain(cls, dom: SalesSummary) -> Self:
        return cls(
            total_sales=dom.total_sales,
            count=dom.count,
            by_category=[CategorySalesOut(category=c.category, sales=c.sales) for c in dom.by_category],
        )


class InventoryLogOut(Schema):
    id: int
    product_id: int
    change: int
    reason: str
    created_at: datetime

    @classmethod
    def from_domain(cls, dom: InventoryLogEntry) -> Self:
        return cls(
            id=dom.id,
            product_id=dom.product_id,
            change=dom.change,
            reason=dom.reason,
            created_at=dom.created_at,
        )


__all__ = (
    "StoreIn",
    "StorePatchIn",
    "StoreOut",
    "ProductIn",
    "ProductPatchIn",
    "ProductOut",
    "LineItemIn",
    "PlaceOrderIn",
    "StatusIn",
    "OrderItemOut",
    "OrderOut",
    "CategorySalesOut",
    "SalesOut",
    "InventoryLogOut",
)
