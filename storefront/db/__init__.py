"""
Persistence — SQLAlchemy async tables and session factory.

    from storefront import db

    engine = db.create_engine("sqlite+aiosqlite:///shop.db")
    await db.create_schema(engine)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
"""

from storefront.db._tables import (
    Base,
    StoreTable,
    ProductTable,
    OrderTable,
    OrderItemTable,
    InventoryLogTable,
)
from storefront.db._engine import (
    SessionFactory,
    create_engine,
    create_schema,
)

__all__ = (
    "Base",
    "StoreTable",
    "ProductTable",
    "OrderTable",
    "OrderItemTable",
    "InventoryLogTable",
    "SessionFactory",
    "create_engine",
    "create_schema",
)
