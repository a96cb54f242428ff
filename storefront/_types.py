"""
Core types for storefront.

Identifier and money aliases shared by every module.
"""

from __future__ import annotations

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type StoreId = int
type ProductId = int
type OrderId = int

type UserId = str
"""Opaque user reference issued by the identity provider."""

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Cents = int
"""Amount in the smallest currency unit (cents, kobo, ...). Never a float."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StoreId",
    "ProductId",
    "OrderId",
    "UserId",
    "Cents",
)
