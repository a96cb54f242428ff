"""
Error taxonomy.

Every failure a service can report is a ``StorefrontError``. Services return
them inside ``Error(...)``; the HTTP layer maps each family to a status code.

    StorefrontError
    ├── ValidationError       400
    ├── NotFoundError         404
    │   └── ProductNotFound
    ├── BusinessRuleError     400
    │   ├── InsufficientStock
    │   ├── InvalidTransition
    │   └── SlugTaken
    ├── UnauthorizedError     401
    └── StorageError          500
"""

from __future__ import annotations


class StorefrontError(Exception):
    code = "STOREFRONT_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationError(StorefrontError):
    """Malformed request shape."""

    code = "VALIDATION_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# Not Found
# ═══════════════════════════════════════════════════════════════════════════════


class NotFoundError(StorefrontError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, id: int | str, message: str | None = None) -> None:
        super().__init__(message or f"{entity} not found")
        self.entity = entity
        self.id = id


class ProductNotFound(NotFoundError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int) -> None:
        super().__init__("Product", product_id, f"Product {product_id} not found")
        self.product_id = product_id


# ═══════════════════════════════════════════════════════════════════════════════
# Business Rules
# ═══════════════════════════════════════════════════════════════════════════════


class BusinessRuleError(StorefrontError):
    code = "BUSINESS_RULE"


class InsufficientStock(BusinessRuleError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, name: str, available: int, requested: int) -> None:
        super().__init__(f"Insufficient stock for {name}")
        self.product_id = product_id
        self.available = available
        self.requested = requested


class InvalidTransition(BusinessRuleError):
    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot change order status from {current} to {target}")
        self.current = current
        self.target = target


class SlugTaken(BusinessRuleError):
    code = "SLUG_TAKEN"

    def __init__(self, slug: str) -> None:
        super().__init__(f"Store slug '{slug}' is already in use")
        self.slug = slug


# ═══════════════════════════════════════════════════════════════════════════════
# Access / Infrastructure
# ═══════════════════════════════════════════════════════════════════════════════


class UnauthorizedError(StorefrontError):
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class StorageError(StorefrontError):
    """Unexpected database failure. The original exception is kept as ``cause``."""

    code = "STORAGE_ERROR"

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


__all__ = (
    "StorefrontError",
    "ValidationError",
    "NotFoundError",
    "ProductNotFound",
    "BusinessRuleError",
    "InsufficientStock",
    "InvalidTransition",
    "SlugTaken",
    "UnauthorizedError",
    "StorageError",
)
