"""HTTP routes under ``/api``."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from storefront import catalog as C
from storefront import orders as O
from storefront.lift import unwrap
from storefront.api._deps import Admin, MaybeUser, ServicesDep, User
from storefront.api._schemas import (
    StoreIn,
    StorePatchIn,
    StoreOut,
    ProductIn,
    ProductPatchIn,
    ProductOut,
    PlaceOrderIn,
    StatusIn,
    OrderOut,
    SalesOut,
    InventoryLogOut,
)

router = APIRouter(prefix="/api")

StoreIdQuery = Annotated[int | None, Query(alias="storeId")]


# ═══════════════════════════════════════════════════════════════════════════════
# Stores
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/stores", response_model=list[StoreOut])
async def list_stores(services: ServicesDep, identity: MaybeUser) -> list[StoreOut]:
    include_inactive = identity is not None and identity.is_admin
    stores = unwrap(await services.catalog.list_stores(include_inactive))
    return [StoreOut.from_domain(s) for s in stores]


@router.get("/stores/{slug}", response_model=StoreOut)
async def get_store(slug: str, services: ServicesDep) -> StoreOut:
    return StoreOut.from_domain(unwrap(await services.catalog.get_store_by_slug(slug)))


@router.post("/stores", response_model=StoreOut, status_code=status.HTTP_201_CREATED)
async def create_store(body: StoreIn, services: ServicesDep, _admin: Admin) -> StoreOut:
    return StoreOut.from_domain(unwrap(await services.catalog.create_store(body.to_domain())))


@router.patch("/stores/{store_id}", response_model=StoreOut)
async def update_store(
    store_id: int,
    body: StorePatchIn,
    services: ServicesDep,
    _admin: Admin,
) -> StoreOut:
    store = unwrap(await services.catalog.update_store(store_id, body.to_domain()))
    return StoreOut.from_domain(store)


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/products", response_model=list[ProductOut])
async def list_products(
    services: ServicesDep,
    category: str | None = None,
    store_id: StoreIdQuery = None,
) -> list[ProductOut]:
    criteria = C.ProductFilter(category=category or None, store_id=store_id)
    products = unwrap(await services.catalog.list_products(criteria))
    return [ProductOut.from_domain(p) for p in products]


@router.get("/products/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, services: ServicesDep) -> ProductOut:
    return ProductOut.from_domain(unwrap(await services.catalog.get_product(product_id)))


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductIn, services: ServicesDep, _admin: Admin) -> ProductOut:
    return ProductOut.from_domain(unwrap(await services.catalog.create_product(body.to_domain())))


@router.put("/products/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    body: ProductPatchIn,
    services: ServicesDep,
    _admin: Admin,
) -> ProductOut:
    product = unwrap(await services.catalog.update_product(product_id, body.to_domain()))
    return ProductOut.from_domain(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, services: ServicesDep, _admin: Admin) -> Response:
    unwrap(await services.catalog.delete_product(product_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/orders", response_model=list[OrderOut])
async def list_orders(
    services: ServicesDep,
    identity: User,
    store_id: StoreIdQuery = None,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> list[OrderOut]:
    criteria = O.OrderFilter(user_id=user_id, store_id=store_id)
    orders = unwrap(await services.orders.list_orders(identity, criteria))
    return [OrderOut.from_domain(o) for o in orders]


@router.get("/orders/{order_id}", response_model=OrderOut)
async def get_order(order_id: int, services: ServicesDep, identity: User) -> OrderOut:
    return OrderOut.from_domain(unwrap(await services.orders.get_order(identity, order_id)))


@router.post("/orders", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def place_order(body: PlaceOrderIn, services: ServicesDep, identity: User) -> OrderOut:
    order = unwrap(await services.orders.place_order(identity, body.to_domain()))
    return OrderOut.from_domain(order)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
async def update_order_status(
    order_id: int,
    body: StatusIn,
    services: ServicesDep,
    identity: Admin,
) -> OrderOut:
    order = unwrap(await services.orders.update_status(identity, order_id, body.status))
    return OrderOut.from_domain(order)


# ═══════════════════════════════════════════════════════════════════════════════
# Admin Dashboard
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/analytics/sales", response_model=SalesOut)
async def sales(services: ServicesDep, identity: Admin, store_id: StoreIdQuery = None) -> SalesOut:
    return SalesOut.from_domain(unwrap(await services.analytics.sales_summary(identity, store_id)))


@router.get("/inventory/logs", response_model=list[InventoryLogOut])
async def inventory_logs(
    services: ServicesDep,
    _admin: Admin,
    product_id: Annotated[int | None, Query(alias="productId")] = None,
) -> list[InventoryLogOut]:
    entries = unwrap(await services.ledger.entries(product_id))
    return [InventoryLogOut.from_domain(e) for e in entries]


__all__ = ("router",)
