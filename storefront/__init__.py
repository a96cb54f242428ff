"""
storefront — multi-store shop backend.

    from storefront import catalog as C   # Stores and products
    from storefront import orders as O    # Checkout and order lifecycle
    from storefront import inventory      # Stock ledger
    from storefront.api import create_app # HTTP surface
"""

from storefront import db
from storefront import catalog
from storefront import inventory
from storefront import orders
from storefront import lift
from storefront.analytics import Analytics, SalesSummary, CategorySales
from storefront.auth import Identity, Role
from storefront.services import Services
from storefront.settings import Settings
from storefront._types import (
    StoreId,
    ProductId,
    OrderId,
    UserId,
    Cents,
)

__version__ = "0.1.0"

__all__ = (
    "db",
    "catalog",
    "inventory",
    "orders",
    "lift",
    "Analytics",
    "SalesSummary",
    "CategorySales",
    "Identity",
    "Role",
    "Services",
    "Settings",
    "StoreId",
    "ProductId",
    "OrderId",
    "UserId",
    "Cents",
)
