"""Concurrent checkouts against one file-backed database."""

import asyncio

from kungfu import Ok, Error

from storefront import catalog as C
from storefront import orders as O
from storefront.auth import Identity
from storefront.errors import InsufficientStock, InvalidTransition
from storefront.lift import unwrap


def one_of(product_id: int, quantity: int = 1) -> O.PlaceOrder:
    return O.PlaceOrder(items=(O.LineItem(product_id, quantity),), payment_method=O.PaymentMethod.CARD)


async def test_last_unit_is_sold_once(services, gateway):
    product = unwrap(await services.catalog.create_product(C.NewProduct("Last Pair", 5000, C.Category.SHOES, stock=1)))

    results = await asyncio.gather(
        services.orders.place_order(Identity.customer("u1"), one_of(product.id)),
        services.orders.place_order(Identity.customer("u2"), one_of(product.id)),
    )

    placed = [r for r in results if isinstance(r, Ok)]
    failed = [r for r in results if isinstance(r, Error)]
    assert len(placed) == 1
    assert len(failed) == 1
    match failed[0]:
        case Error(e):
            assert isinstance(e, InsufficientStock)

    assert unwrap(await services.catalog.get_product(product.id)).stock == 0
    assert [e.change for e in unwrap(await services.ledger.entries(product.id))] == [-1]
    assert gateway.call_count == 1


async def test_stock_is_conserved_under_load(services, admin):
    product = unwrap(await services.catalog.create_product(C.NewProduct("Sneaker", 1000, C.Category.SHOES, stock=7)))

    results = await asyncio.gather(*(
        services.orders.place_order(Identity.customer(f"u{i}"), one_of(product.id, 2))
        for i in range(6)
    ))
    placed = [unwrap(r) for r in results if isinstance(r, Ok)]

    assert len(placed) == 3
    stock = unwrap(await services.catalog.get_product(product.id)).stock
    assert stock == 1

    unwrap(await services.orders.update_status(admin, placed[0].id, O.OrderStatus.CANCELLED))

    orders = unwrap(await services.orders.list_orders(admin))
    live = sum(
        item.quantity
        for order in orders if order.status is not O.OrderStatus.CANCELLED
        for item in order.items
    )
    stock = unwrap(await services.catalog.get_product(product.id)).stock
    assert stock == 3
    assert live + stock == 7


async def test_concurrent_cancellations_restock_once(services, admin):
    product = unwrap(await services.catalog.create_product(C.NewProduct("Sneaker", 1000, C.Category.SHOES, stock=7)))
    order = unwrap(await services.orders.place_order(Identity.customer("u1"), one_of(product.id, 2)))

    results = await asyncio.gather(
        services.orders.update_status(admin, order.id, O.OrderStatus.CANCELLED),
        services.orders.update_status(admin, order.id, O.OrderStatus.CANCELLED),
    )

    assert len([r for r in results if isinstance(r, Ok)]) == 1
    failed = [r for r in results if isinstance(r, Error)]
    assert len(failed) == 1
    match failed[0]:
        case Error(e):
            assert isinstance(e, InvalidTransition)

    assert unwrap(await services.catalog.get_product(product.id)).stock == 7
    changes = [e.change for e in unwrap(await services.ledger.entries(product.id))]
    assert changes == [2, -2]
