"""
Store and Product CRUD over SQLAlchemy.

Every public method returns ``Result[T, StorefrontError]``. The private
``_``-prefixed coroutines raise; ``guarded`` turns the raise into ``Error``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kungfu import Result

from storefront.db import (
    SessionFactory,
    StoreTable,
    ProductTable,
    OrderItemTable,
    InventoryLogTable,
)
from storefront.errors import (
    StorefrontError,
    NotFoundError,
    ProductNotFound,
    BusinessRuleError,
    SlugTaken,
)
from storefront.lift import guarded, unwrap
from storefront.catalog._types import (
    Store,
    NewStore,
    StoreChanges,
    Product,
    NewProduct,
    ProductChanges,
    ProductFilter,
    check_store_fields,
    check_product_fields,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Row → Domain
# ═══════════════════════════════════════════════════════════════════════════════


def to_store(row: StoreTable) -> Store:
    return Store(
        id=row.id,
        name=row.name,
        slug=row.slug,
        color=row.color,
        is_active=row.is_active,
        created_at=row.created_at,
    )


def to_product(row: ProductTable) -> Product:
    return Product(
        id=row.id,
        store_id=row.store_id,
        name=row.name,
        description=row.description,
        price=row.price,
        category=row.category,
        stock=row.stock,
        image_url=row.image_url,
        created_at=row.created_at,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog Repository
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogRepo:
    """
    Stores and products.

    Example:
        catalog = CatalogRepo(session_factory)

        match await catalog.create_store(NewStore("Main Shoes", "shoes")):
            case Ok(store): ...
            case Error(e): ...
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session = session_factory

    # ───────────────────────────────────────────────────────────────────────────
    # Stores
    # ───────────────────────────────────────────────────────────────────────────

    async def list_stores(self, include_inactive: bool = False) -> Result[list[Store], StorefrontError]:
        return await guarded(lambda: self._list_stores(include_inactive))

    async def get_store(self, store_id: int) -> Result[Store, StorefrontError]:
        return await guarded(lambda: self._get_store(store_id))

    async def get_store_by_slug(self, slug: str) -> Result[Store, StorefrontError]:
        """Storefront lookup: inactive stores are reported as missing."""
        return await guarded(lambda: self._get_store_by_slug(slug))

    async def create_store(self, new: NewStore) -> Result[Store, StorefrontError]:
        return await guarded(lambda: self._create_store(new))

    async def update_store(self, store_id: int, changes: StoreChanges) -> Result[Store, StorefrontError]:
        return await guarded(lambda: self._update_store(store_id, changes))

    async def _list_stores(self, include_inactive: bool) -> list[Store]:
        async with self._session() as session:
            stmt = select(StoreTable).order_by(StoreTable.id)
            if not include_inactive:
                stmt = stmt.where(StoreTable.is_active.is_(True))
            rows = (await session.execute(stmt)).scalars().all()
            return [to_store(r) for r in rows]

    async def _get_store(self, store_id: int) -> Store:
        async with self._session() as session:
            row = await session.get(StoreTable, store_id)
            if row is None:
                raise NotFoundError("Store", store_id)
            return to_store(row)

    async def _get_store_by_slug(self, slug: str) -> Store:
        async with self._session() as session:
            row = (
                await session.execute(select(StoreTable).where(StoreTable.slug == slug))
            ).scalar_one_or_none()
            if row is None or not row.is_active:
                raise NotFoundError("Store", slug, "Store not found or inactive")
            return to_store(row)

    async def _create_store(self, new: NewStore) -> Store:
        values = unwrap(check_store_fields({"name": new.name, "slug": new.slug}))
        async with self._session() as session:
            async with session.begin():
                await self._ensure_slug_free(session, values["slug"])
                row = StoreTable(
                    name=new.name,
                    slug=new.slug,
                    color=new.color,
                    is_active=new.is_active,
                    created_at=datetime.now(),
                )
                session.add(row)
                try:
                    await session.flush()
                except IntegrityError as e:
                    raise SlugTaken(new.slug) from e
            logger.info("Created store %s (%s)", row.id, row.slug)
            return to_store(row)

    async def _update_store(self, store_id: int, changes: StoreChanges) -> Store:
        values = unwrap(check_store_fields(changes.values()))
        async with self._session() as session:
            async with session.begin():
                row = await session.get(StoreTable, store_id)
                if row is None:
                    raise NotFoundError("Store", store_id)
                if "slug" in values and values["slug"] != row.slug:
                    await self._ensure_slug_free(session, values["slug"])
                for key, value in values.items():
                    setattr(row, key, value)
                try:
                    await session.flush()
                except IntegrityError as e:
                    raise SlugTaken(values.get("slug", row.slug)) from e
            return to_store(row)

    async def _ensure_slug_free(self, session: AsyncSession, slug: str) -> None:
        taken = (
            await session.execute(select(exists().where(StoreTable.slug == slug)))
        ).scalar()
        if taken:
            raise SlugTaken(slug)

    # ───────────────────────────────────────────────────────────────────────────
    # Products
    # ───────────────────────────────────────────────────────────────────────────

    async def list_products(
        self,
        criteria: ProductFilter = ProductFilter(),
    ) -> Result[list[Product], StorefrontError]:
        return await guarded(lambda: self._list_products(criteria))

    async def get_product(self, product_id: int) -> Result[Product, StorefrontError]:
        return await guarded(lambda: self._get_product(product_id))

    async def create_product(self, new: NewProduct) -> Result[Product, StorefrontError]:
        return await guarded(lambda: self._create_product(new))

    async def update_product(
        self,
        product_id: int,
        changes: ProductChanges,
    ) -> Result[Product, StorefrontError]:
        return await guarded(lambda: self._update_product(product_id, changes))

    async def delete_product(self, product_id: int) -> Result[None, StorefrontError]:
        """
        Delete a product that has never been ordered or stock-adjusted.

        Order items and ledger rows are permanent records pointing at the
        product, so a product with history is refused with BusinessRuleError.
        """
        return await guarded(lambda: self._delete_product(product_id))

    async def _list_products(self, criteria: ProductFilter) -> list[Product]:
        async with self._session() as session:
            stmt = select(ProductTable).order_by(ProductTable.id)
            if criteria.category is not None:
                stmt = stmt.where(ProductTable.category == criteria.category)
            if criteria.store_id is not None:
                stmt = stmt.where(ProductTable.store_id == criteria.store_id)
            rows = (await session.execute(stmt)).scalars().all()
            return [to_product(r) for r in rows]

    async def _get_product(self, product_id: int) -> Product:
        async with self._session() as session:
            row = await session.get(ProductTable, product_id)
            if row is None:
                raise ProductNotFound(product_id)
            return to_product(row)

    async def _create_product(self, new: NewProduct) -> Product:
        unwrap(check_product_fields({
            "name": new.name,
            "category": new.category,
            "price": new.price,
            "stock": new.stock,
        }))
        async with self._session() as session:
            async with session.begin():
                if new.store_id is not None:
                    await self._ensure_store_exists(session, new.store_id)
                row = ProductTable(
                    store_id=new.store_id,
                    name=new.name,
                    description=new.description,
                    price=new.price,
                    category=new.category,
                    stock=new.stock,
                    image_url=new.image_url,
                    created_at=datetime.now(),
                )
                session.add(row)
                await session.flush()
            logger.info("Created product %s (%s)", row.id, row.name)
            return to_product(row)

    async def _update_product(self, product_id: int, changes: ProductChanges) -> Product:
        values = unwrap(check_product_fields(changes.values()))
        async with self._session() as session:
            async with session.begin():
                row = await session.get(ProductTable, product_id)
                if row is None:
                    raise ProductNotFound(product_id)
                if values.get("store_id") is not None:
                    await self._ensure_store_exists(session, values["store_id"])
                for key, value in values.items():
                    setattr(row, key, value)
            return to_product(row)

    async def _delete_product(self, product_id: int) -> None:
        async with self._session() as session:
            async with session.begin():
                row = await session.get(ProductTable, product_id)
                if row is None:
                    raise ProductNotFound(product_id)
                has_history = (
                    await session.execute(select(or_(
                        exists().where(OrderItemTable.product_id == product_id),
                        exists().where(InventoryLogTable.product_id == product_id),
                    )))
                ).scalar()
                if has_history:
                    raise BusinessRuleError(
                        f"Product {product_id} has order history and cannot be deleted"
                    )
                await session.delete(row)
            logger.info("Deleted product %s", product_id)

    async def _ensure_store_exists(self, session: AsyncSession, store_id: int) -> None:
        if await session.get(StoreTable, store_id) is None:
            raise NotFoundError("Store", store_id)


__all__ = (
    "CatalogRepo",
    "to_store",
    "to_product",
)
