"""
Catalog — stores and products.

    from storefront import catalog as C

    repo = C.CatalogRepo(session_factory)
    store = await repo.create_store(C.NewStore("Main Shoes", "shoes", "#2563eb"))
    shoes = await repo.list_products(C.ProductFilter(category=C.Category.SHOES))
"""

from storefront.catalog._types import (
    SLUG_PATTERN,
    Unset,
    UNSET,
    Category,
    Store,
    NewStore,
    StoreChanges,
    Product,
    NewProduct,
    ProductChanges,
    ProductFilter,
    check_slug,
)
from storefront.catalog._repo import (
    CatalogRepo,
    to_store,
    to_product,
)

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
    "CatalogRepo",
    "to_store",
    "to_product",
)
