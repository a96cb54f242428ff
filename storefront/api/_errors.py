"""
Error responses.

Every failure leaves the API as ``{"message": ...}`` with the status code of
its error family.
"""

from __future__ import annotations

import logging
from typing import cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.errors import (
    StorefrontError,
    ValidationError,
    NotFoundError,
    BusinessRuleError,
    UnauthorizedError,
    StorageError,
)

logger = logging.getLogger(__name__)


STATUS_CODES: tuple[tuple[type[StorefrontError], int], ...] = (
    (ValidationError, 400),
    (BusinessRuleError, 400),
    (NotFoundError, 404),
    (UnauthorizedError, 401),
    (StorageError, 500),
)


def status_for(error: StorefrontError) -> int:
    for kind, code in STATUS_CODES:
        if isinstance(error, kind):
            return code
    return 500


def message_for(error: StorefrontError) -> str:
    if isinstance(error, StorageError):
        return "Internal server error"
    return error.message


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


async def storefront_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    error = cast(StorefrontError, exc)
    status = status_for(error)
    if status >= 500:
        logger.error("Request failed: %r", error)
    return JSONResponse(status_code=status, content={"message": message_for(error)})


async def request_validation_handler(_request: Request, exc: Exception) -> JSONResponse:
    invalid = cast(RequestValidationError, exc)
    return JSONResponse(status_code=400, content={"message": _first_validation_message(invalid)})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


__all__ = (
    "STATUS_CODES",
    "status_for",
    "message_for",
    "install_error_handlers",
)
