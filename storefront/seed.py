"""Demo catalog: two stores with one product each, created only into an empty database."""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from storefront.catalog import CatalogRepo, Category, NewStore, NewProduct
from storefront.errors import StorefrontError

logger = logging.getLogger(__name__)


async def seed_catalog(catalog: CatalogRepo) -> Result[bool, StorefrontError]:
    """Returns Ok(True) when data was inserted, Ok(False) when stores already exist."""
    match await catalog.list_stores(include_inactive=True):
        case Error(e):
            return Error(e)
        case Ok(stores) if stores:
            return Ok(False)
        case Ok(_):
            pass

    logger.info("Seeding stores...")
    match await catalog.create_store(NewStore("Main Shoes", "shoes", "#2563eb")):
        case Error(e):
            return Error(e)
        case Ok(shoes):
            pass
    match await catalog.create_store(NewStore("Glow Cosmetics", "cosmetics", "#db2777")):
        case Error(e):
            return Error(e)
        case Ok(cosmetics):
            pass

    logger.info("Seeding products...")
    products = (
        NewProduct(
            store_id=shoes.id,
            name="Classic Leather Sneakers",
            description="Premium white leather sneakers.",
            price=8500,
            category=Category.SHOES,
            stock=50,
            image_url="https://images.unsplash.com/photo-1549298916-b41d501d3772",
        ),
        NewProduct(
            store_id=cosmetics.id,
            name="Matte Lipstick - Ruby Red",
            description="Long-lasting matte lipstick.",
            price=2500,
            category=Category.COSMETICS,
            stock=100,
            image_url="https://images.unsplash.com/photo-1586495777744-4413f21062dc",
        ),
    )
    for product in products:
        match await catalog.create_product(product):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

    logger.info("Database seeded successfully")
    return Ok(True)


__all__ = ("seed_catalog",)
