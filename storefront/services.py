"""
The wired set of repositories an application runs on.

    services = await Services.open(Settings.from_env())
    try:
        ...
    finally:
        await services.close()
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from storefront.analytics import Analytics
from storefront.catalog import CatalogRepo
from storefront.db import SessionFactory, create_engine, create_schema
from storefront.inventory import InventoryLedger
from storefront.orders import OrderEngine
from storefront.payments import PaymentGateway
from storefront.settings import Settings


@dataclass(slots=True)
class Services:
    engine: AsyncEngine
    session_factory: SessionFactory
    catalog: CatalogRepo
    orders: OrderEngine
    ledger: InventoryLedger
    analytics: Analytics

    @classmethod
    async def open(
        cls,
        settings: Settings,
        gateway: PaymentGateway | None = None,
        create_tables: bool = True,
    ) -> Services:
        engine = create_engine(settings.database_url, echo=settings.sql_echo)
        if create_tables:
            await create_schema(engine)
        session_factory = async_sessionmaker(engine, expire_on_commit=False)
        return cls(
            engine=engine,
            session_factory=session_factory,
            catalog=CatalogRepo(session_factory),
            orders=OrderEngine(session_factory, settings.order_transitions, gateway),
            ledger=InventoryLedger(session_factory),
            analytics=Analytics(session_factory),
        )

    async def close(self) -> None:
        await self.engine.dispose()


__all__ = ("Services",)
