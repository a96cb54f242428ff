"""
Application factory.

    app = create_app(Settings.from_env())

Without ``services`` the app opens its own on startup (and seeds the demo
catalog when ``SEED_ON_STARTUP`` is set). Tests pass ready-made services in.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from kungfu import Ok, Error

from storefront.seed import seed_catalog
from storefront.services import Services
from storefront.settings import Settings, configure_logging
from storefront.api._errors import install_error_handlers
from storefront.api._routes import router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            yield
            return

        opened = await Services.open(settings)
        if settings.seed_on_startup:
            match await seed_catalog(opened.catalog):
                case Ok(True):
                    logger.info("Demo catalog created")
                case Ok(False):
                    logger.info("Catalog already populated, skipping seed")
                case Error(e):
                    logger.error("Seeding failed: %s", e.message)
        app.state.services = opened
        logger.info("Storefront ready on %s", settings.database_url)
        try:
            yield
        finally:
            await opened.close()

    app = FastAPI(title="Storefront", version="0.1.0", lifespan=lifespan)
    if services is not None:
        app.state.services = services
    install_error_handlers(app)
    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


__all__ = ("create_app",)
