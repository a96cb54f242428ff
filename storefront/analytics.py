"""
Analytics — sales summary for the admin dashboard.

An order counts as a sale once it is paid and until it is cancelled, i.e.
while its status is paid, shipped or delivered.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select

from kungfu import Result, Ok, Error

from storefront.auth import Identity, require_admin
from storefront.db import SessionFactory, OrderTable, OrderItemTable, ProductTable
from storefront.errors import StorefrontError
from storefront.lift import guarded
from storefront.orders import REVENUE_STATUSES


@dataclass(frozen=True, slots=True)
class CategorySales:
    category: str
    sales: int


@dataclass(frozen=True, slots=True)
class SalesSummary:
    total_sales: int
    count: int
    by_category: tuple[CategorySales, ...]


class Analytics:
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session = session_factory

    async def sales_summary(
        self,
        identity: Identity,
        store_id: int | None = None,
    ) -> Result[SalesSummary, StorefrontError]:
        match require_admin(identity):
            case Error(e):
                return Error(e)
            case Ok(_):
                return await guarded(lambda: self._sales_summary(store_id))

    async def _sales_summary(self, store_id: int | None) -> SalesSummary:
        statuses = [s.value for s in REVENUE_STATUSES]
        totals = select(
            func.coalesce(func.sum(OrderTable.total), 0),
            func.count(OrderTable.id),
        ).where(OrderTable.status.in_(statuses))

        line_value = func.sum(OrderItemTable.price * OrderItemTable.quantity)
        categories = (
            select(ProductTable.category, line_value)
            .join(OrderItemTable, OrderItemTable.product_id == ProductTable.id)
            .join(OrderTable, OrderTable.id == OrderItemTable.order_id)
            .where(OrderTable.status.in_(statuses))
            .group_by(ProductTable.category)
            .order_by(ProductTable.category)
        )
        if store_id is not None:
            totals = totals.where(OrderTable.store_id == store_id)
            categories = categories.where(OrderTable.store_id == store_id)

        async with self._session() as session:
            total_sales, count = (await session.execute(totals)).one()
            rows = (await session.execute(categories)).all()

        return SalesSummary(
            total_sales=int(total_sales),
            count=int(count),
            by_category=tuple(CategorySales(category, int(sales)) for category, sales in rows),
        )


__all__ = (
    "CategorySales",
    "SalesSummary",
    "Analytics",
)
