"""
Identity — who is calling, threaded explicitly into every service call.

Authentication itself belongs to an upstream identity provider. This module
only models the identity it hands us and the one capability check the
storefront needs: admin or not.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from kungfu import Result, Ok, Error

from storefront.errors import UnauthorizedError


class Role(StrEnum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: str
    email: str | None = None
    roles: frozenset[Role] = field(default_factory=lambda: frozenset({Role.CUSTOMER}))

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @classmethod
    def customer(cls, user_id: str, email: str | None = None) -> Identity:
        return cls(user_id=user_id, email=email)

    @classmethod
    def admin(cls, user_id: str, email: str | None = None) -> Identity:
        return cls(user_id=user_id, email=email, roles=frozenset({Role.ADMIN}))


def parse_roles(raw: str | None) -> frozenset[Role]:
    """Parse a comma-separated role claim. Unknown roles are ignored."""
    if not raw:
        return frozenset({Role.CUSTOMER})
    known = {r.value for r in Role}
    roles = {Role(part) for part in (p.strip().lower() for p in raw.split(",")) if part in known}
    return frozenset(roles or {Role.CUSTOMER})


def require_admin(identity: Identity) -> Result[Identity, UnauthorizedError]:
    if identity.is_admin:
        return Ok(identity)
    return Error(UnauthorizedError("Admin access required"))


__all__ = (
    "Role",
    "Identity",
    "parse_roles",
    "require_admin",
)
