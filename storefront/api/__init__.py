"""
HTTP API — FastAPI application over the storefront services.

    from storefront.api import create_app

    app = create_app()
"""

from storefront.api._app import create_app
from storefront.api._errors import (
    STATUS_CODES,
    status_for,
    message_for,
    install_error_handlers,
)
from storefront.api._routes import router

__all__ = (
    "create_app",
    "STATUS_CODES",
    "status_for",
    "message_for",
    "install_error_handlers",
    "router",
)
