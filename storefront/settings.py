"""
Settings, read once from the environment (and a ``.env`` file if present).

    DATABASE_URL        sqlite+aiosqlite:///./storefront.db
    LOG_LEVEL           INFO
    ORDER_TRANSITIONS   strict | free
    SEED_ON_STARTUP     true
    SQL_ECHO            false
    HOST                0.0.0.0
    PORT                8000
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from storefront.orders import TransitionMode

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = "sqlite+aiosqlite:///./storefront.db"
    log_level: str = "INFO"
    order_transitions: TransitionMode = TransitionMode.STRICT
    seed_on_startup: bool = True
    sql_echo: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Self:
        """Build settings from ``env`` (defaults to ``os.environ`` after loading ``.env``)."""
        if env is None:
            load_dotenv()
            env = os.environ
        defaults = cls()

        transitions = env.get("ORDER_TRANSITIONS", defaults.order_transitions.value).strip().lower()
        try:
            mode = TransitionMode(transitions)
        except ValueError:
            raise ValueError(
                f"ORDER_TRANSITIONS must be one of {[m.value for m in TransitionMode]}, got {transitions!r}"
            ) from None

        port = env.get("PORT", str(defaults.port))
        if not port.isdigit():
            raise ValueError(f"PORT must be an integer, got {port!r}")

        return cls(
            database_url=env.get("DATABASE_URL", defaults.database_url),
            log_level=env.get("LOG_LEVEL", defaults.log_level).upper(),
            order_transitions=mode,
            seed_on_startup=_flag(env, "SEED_ON_STARTUP", defaults.seed_on_startup),
            sql_echo=_flag(env, "SQL_ECHO", defaults.sql_echo),
            host=env.get("HOST", defaults.host),
            port=int(port),
        )

    def with_overrides(self, **changes: object) -> Self:
        return replace(self, **changes)


def configure_logging(level: str) -> None:
    """Root logging setup. A no-op when handlers are already installed."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


__all__ = (
    "Settings",
    "configure_logging",
)
