"""
Request dependencies: services and the caller's identity.

Authentication happens upstream. The identity provider (or the gateway in
front of this service) forwards the authenticated user as headers:

    X-User-Id       required on protected routes
    X-User-Email    optional
    X-User-Roles    comma-separated; "admin" grants admin access
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from storefront.auth import Identity, parse_roles, require_admin
from storefront.errors import UnauthorizedError
from storefront.lift import unwrap
from storefront.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def optional_identity(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_email: Annotated[str | None, Header()] = None,
    x_user_roles: Annotated[str | None, Header()] = None,
) -> Identity | None:
    if not x_user_id:
        return None
    return Identity(user_id=x_user_id, email=x_user_email, roles=parse_roles(x_user_roles))


def current_identity(
    identity: Annotated[Identity | None, Depends(optional_identity)],
) -> Identity:
    if identity is None:
        raise UnauthorizedError()
    return identity


def admin_identity(
    identity: Annotated[Identity, Depends(current_identity)],
) -> Identity:
    return unwrap(require_admin(identity))


ServicesDep = Annotated[Services, Depends(get_services)]
MaybeUser = Annotated[Identity | None, Depends(optional_identity)]
User = Annotated[Identity, Depends(current_identity)]
Admin = Annotated[Identity, Depends(admin_identity)]


__all__ = (
    "get_services",
    "optional_identity",
    "current_identity",
    "admin_identity",
    "ServicesDep",
    "MaybeUser",
    "User",
    "Admin",
)
