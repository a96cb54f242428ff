"""
Stock movements and the append-only inventory log.

``withdraw`` and ``restock`` run inside a caller's transaction: they change
``products.stock`` and append the matching log row in the same unit of work.
Nothing here commits.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from kungfu import Result

from storefront.db import SessionFactory, ProductTable, InventoryLogTable
from storefront.errors import StorefrontError, InsufficientStock, ProductNotFound
from storefront.lift import guarded
from storefront.inventory._types import InventoryLogEntry


def order_reason(order_id: int) -> str:
    return f"Order #{order_id}"


def cancellation_reason(order_id: int) -> str:
    return f"Order #{order_id} cancelled"


# ═══════════════════════════════════════════════════════════════════════════════
# Movements (inside an open transaction)
# ═══════════════════════════════════════════════════════════════════════════════

async def append(session: AsyncSession, product_id: int, change: int, reason: str) -> None:
    session.add(InventoryLogTable(
        product_id=product_id,
        change=change,
        reason=reason,
        created_at=datetime.now(),
    ))


async def withdraw(session: AsyncSession, product_id: int, quantity: int, reason: str) -> None:
    """
    Take ``quantity`` units out of stock, or raise InsufficientStock.

    The check and the decrement are one conditional UPDATE, so two
    transactions racing for the last unit cannot both succeed: the loser
    matches zero rows.
    """
    stmt = (
        update(ProductTable)
        .where(ProductTable.id == product_id, ProductTable.stock >= quantity)
        .values(stock=ProductTable.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    cursor = cast(CursorResult[Any], await session.execute(stmt))
    if cursor.rowcount != 1:
        row = (
            await session.execute(
                select(ProductTable.name, ProductTable.stock).where(ProductTable.id == product_id)
            )
        ).one_or_none()
        if row is None:
            raise ProductNotFound(product_id)
        raise InsufficientStock(product_id, row.name, row.stock, quantity)
    await append(session, product_id, -quantity, reason)


async def restock(session: AsyncSession, product_id: int, quantity: int, reason: str) -> None:
    stmt = (
        update(ProductTable)
        .where(ProductTable.id == product_id)
        .values(stock=ProductTable.stock + quantity)
        .execution_options(synchronize_session=False)
    )
    cursor = cast(CursorResult[Any], await session.execute(stmt))
    if cursor.rowcount != 1:
        raise ProductNotFound(product_id)
    await append(session, product_id, quantity, reason)


# ═══════════════════════════════════════════════════════════════════════════════
# Ledger Reads
# ═══════════════════════════════════════════════════════════════════════════════

class InventoryLedger:
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session = session_factory

    async def entries(
        self,
        product_id: int | None = None,
    ) -> Result[list[InventoryLogEntry], StorefrontError]:
        """Log entries, newest first, optionally for one product."""
        return await guarded(lambda: self._entries(product_id))

    async def _entries(self, product_id: int | None) -> list[InventoryLogEntry]:
        async with self._session() as session:
            stmt = select(InventoryLogTable).order_by(InventoryLogTable.id.desc())
            if product_id is not None:
                stmt = stmt.where(InventoryLogTable.product_id == product_id)
            rows = (await session.execute(stmt)).scalars().all()
            return [
                InventoryLogEntry(
                    id=r.id,
                    product_id=r.product_id,
                    change=r.change,
                    reason=r.reason,
                    created_at=r.created_at,
                )
                for r in rows
            ]


__all__ = (
    "order_reason",
    "cancellation_reason",
    "append",
    "withdraw",
    "restock",
    "InventoryLedger",
)
