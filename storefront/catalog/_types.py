"""Catalog domain types."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from kungfu import Result, Ok, Error

from storefront._types import StoreId, ProductId, Cents
from storefront.errors import ValidationError


SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class Unset:
    """Marker for a field a partial update leaves alone."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset()


def _set_values(changes: Any) -> dict[str, Any]:
    return {
        f.name: value
        for f in fields(changes)
        if (value := getattr(changes, f.name)) is not UNSET
    }


class Category:
    """Known product categories. The column is an open string."""

    SHOES = "Shoes"
    COSMETICS = "Cosmetics"


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Store:
    id: StoreId
    name: str
    slug: str
    color: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True, slots=True)
class NewStore:
    name: str
    slug: str
    color: str = "#000000"
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class StoreChanges:
    """Partial update. Fields left as ``UNSET`` are untouched."""

    name: str | Unset = UNSET
    slug: str | Unset = UNSET
    color: str | Unset = UNSET
    is_active: bool | Unset = UNSET

    def values(self) -> dict[str, Any]:
        return _set_values(self)


# ═══════════════════════════════════════════════════════════════════════════════
# Product
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Product:
    id: ProductId
    store_id: StoreId | None
    name: str
    description: str
    price: Cents
    category: str
    stock: int
    image_url: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class NewProduct:
    name: str
    price: Cents
    category: str
    stock: int = 0
    description: str = ""
    image_url: str = ""
    store_id: StoreId | None = None


@dataclass(frozen=True, slots=True)
class ProductChanges:
    """
    Partial update. Fields left as ``UNSET`` are untouched; ``store_id=None``
    moves the product to the global catalog.
    """

    name: str | Unset = UNSET
    description: str | Unset = UNSET
    price: Cents | Unset = UNSET
    category: str | Unset = UNSET
    stock: int | Unset = UNSET
    image_url: str | Unset = UNSET
    store_id: StoreId | None | Unset = UNSET

    def values(self) -> dict[str, Any]:
        return _set_values(self)


@dataclass(frozen=True, slots=True)
class ProductFilter:
    """Optional predicates, combined with AND."""

    category: str | None = None
    store_id: StoreId | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════════════


def check_slug(slug: str) -> Result[str, ValidationError]:
    if not SLUG_PATTERN.match(slug):
        return Error(ValidationError(
            "Slug must contain only lowercase letters, digits and single hyphens"
        ))
    return Ok(slug)


def _reject_nulls(
    values: dict[str, Any],
    nullable: frozenset[str] = frozenset(),
) -> Result[dict[str, Any], ValidationError]:
    for key, value in values.items():
        if value is None and key not in nullable:
            return Error(ValidationError(f"{key} cannot be null"))
    return Ok(values)


def check_store_fields(values: dict[str, Any]) -> Result[dict[str, Any], ValidationError]:
    match _reject_nulls(values):
        case Error(e):
            return Error(e)
        case Ok(_):
            pass
    if "name" in values and not values["name"].strip():
        return Error(ValidationError("Store name is required"))
    if "slug" in values:
        match check_slug(values["slug"]):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass
    return Ok(values)


def check_product_fields(values: dict[str, Any]) -> Result[dict[str, Any], ValidationError]:
    match _reject_nulls(values, nullable=frozenset({"store_id"})):
        case Error(e):
            return Error(e)
        case Ok(_):
            pass
    if "name" in values and not values["name"].strip():
        return Error(ValidationError("Product name is required"))
    if "category" in values and not values["category"].strip():
        return Error(ValidationError("Category is required"))
    for key in ("price", "stock"):
        if key in values:
            value = values[key]
            if isinstance(value, bool) or not isinstance(value, int):
                return Error(ValidationError(f"{key.capitalize()} must be an integer"))
            if value < 0:
                return Error(ValidationError(f"{key.capitalize()} cannot be negative"))
    return Ok(values)


__all__ = (
    "SLUG_PATTERN",
    "Unset",
    "UNSET",
    "Category",
    "Store",
    "NewStore",
    "StoreChanges",
    "Product",
    "NewProduct",
    "ProductChanges",
    "ProductFilter",
    "check_slug",
    "check_store_fields",
    "check_product_fields",
)
