"""Inventory ledger types."""

from dataclasses import dataclass
from datetime import datetime

from storefront._types import ProductId


@dataclass(frozen=True, slots=True)
class InventoryLogEntry:
    """One signed stock delta. Never mutated after it is written."""

    id: int
    product_id: ProductId
    change: int
    reason: str
    created_at: datetime


__all__ = ("InventoryLogEntry",)
