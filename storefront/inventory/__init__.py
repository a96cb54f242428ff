"""
Inventory — stock movements and the append-only ledger.

    from storefront import inventory as Inv

    async with session.begin():
        await Inv.withdraw(session, product_id, 2, Inv.order_reason(order_id))

    entries = await Inv.InventoryLedger(session_factory).entries(product_id)
"""

from storefront.inventory._types import InventoryLogEntry
from storefront.inventory._ledger import (
    order_reason,
    cancellation_reason,
    append,
    withdraw,
    restock,
    InventoryLedger,
)

__all__ = (
    "InventoryLogEntry",
    "order_reason",
    "cancellation_reason",
    "append",
    "withdraw",
    "restock",
    "InventoryLedger",
)
