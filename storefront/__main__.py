"""
Command line entry point.

    storefront serve        run the HTTP API (uvicorn)
    storefront init-db      create tables
    storefront seed         create tables and insert the demo catalog

Settings come from the environment, see ``storefront.settings``.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

import uvicorn
from kungfu import Ok, Error

from storefront.api import create_app
from storefront.seed import seed_catalog
from storefront.services import Services
from storefront.settings import Settings, configure_logging

logger = logging.getLogger("storefront")


# ═══════════════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════════════


async def init_db(settings: Settings) -> int:
    services = await Services.open(settings)
    await services.close()
    logger.info("Tables created on %s", settings.database_url)
    return 0


async def seed(settings: Settings) -> int:
    services = await Services.open(settings)
    try:
        match await seed_catalog(services.catalog):
            case Ok(True):
                return 0
            case Ok(False):
                logger.info("Stores already exist, nothing to seed")
                return 0
            case Error(e):
                logger.error("Seeding failed: %s", e.message)
                return 1
    finally:
        await services.close()


def serve(settings: Settings) -> int:
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


# ═══════════════════════════════════════════════════════════════════════════════
# Main
# ═══════════════════════════════════════════════════════════════════════════════


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storefront", description="Multi-store storefront backend")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="run the HTTP API")
    serve_cmd.add_argument("--host", help="bind address (overrides HOST)")
    serve_cmd.add_argument("--port", type=int, help="bind port (overrides PORT)")

    commands.add_parser("init-db", help="create database tables")
    commands.add_parser("seed", help="insert the demo catalog into an empty database")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    match args.command:
        case "serve":
            overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None}
            return serve(settings.with_overrides(**overrides))
        case "init-db":
            return asyncio.run(init_db(settings))
        case "seed":
            return asyncio.run(seed(settings))
        case _:
            return 2


if __name__ == "__main__":
    sys.exit(main())
