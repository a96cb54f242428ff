import pytest
from kungfu import Ok, Error
from sqlalchemy import func, select

from storefront import catalog as C
from storefront import orders as O
from storefront.db import OrderItemTable, OrderTable
from storefront.errors import (
    BusinessRuleError,
    InsufficientStock,
    NotFoundError,
    ProductNotFound,
    ValidationError,
)
from storefront.lift import unwrap


def checkout(*lines: tuple[int, int], store_id: int | None = None, phone: str | None = None) -> O.PlaceOrder:
    return O.PlaceOrder(
        items=tuple(O.LineItem(pid, qty) for pid, qty in lines),
        payment_method=O.PaymentMethod.MPESA,
        store_id=store_id,
        payment_phone_number=phone,
    )


async def stock_of(services, product_id: int) -> int:
    return unwrap(await services.catalog.get_product(product_id)).stock


async def count_rows(services, table) -> int:
    async with services.session_factory() as session:
        return (await session.execute(select(func.count()).select_from(table))).scalar_one()


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


async def test_place_order_decrements_stock_and_logs(services, shop, alice, gateway):
    order = unwrap(await services.orders.place_order(
        alice, checkout((shop.lipstick.id, 2), store_id=shop.store.id, phone="254700000000")
    ))

    assert order.total == 5000
    assert order.status is O.OrderStatus.PAID
    assert order.payment_status is O.PaymentStatus.PAID
    assert order.user_id == "alice"
    assert [(i.product_id, i.quantity, i.price) for i in order.items] == [(shop.lipstick.id, 2, 2500)]
    assert order.items[0].product.name == "Matte Lipstick - Ruby Red"
    assert await stock_of(services, shop.lipstick.id) == 8
    assert gateway.call_count == 1

    entries = unwrap(await services.ledger.entries(shop.lipstick.id))
    assert [(e.change, e.reason) for e in entries] == [(-2, f"Order #{order.id}")]


async def test_total_is_sum_of_snapshot_lines(services, shop, alice):
    order = unwrap(await services.orders.place_order(
        alice, checkout((shop.sneakers.id, 1), (shop.lipstick.id, 3))
    ))

    assert order.total == 8500 + 3 * 2500
    assert order.total == sum(i.subtotal for i in order.items)


async def test_insufficient_stock_changes_nothing(services, shop, alice, gateway):
    match await services.orders.place_order(alice, checkout((shop.lipstick.id, 11))):
        case Error(InsufficientStock() as e):
            assert e.message == "Insufficient stock for Matte Lipstick - Ruby Red"
            assert (e.available, e.requested) == (10, 11)
        case other:
            raise AssertionError(other)

    assert await stock_of(services, shop.lipstick.id) == 10
    assert await count_rows(services, OrderTable) == 0
    assert unwrap(await services.ledger.entries()) == []
    assert gateway.call_count == 0


async def test_missing_product_aborts_whole_order(services, shop, alice):
    match await services.orders.place_order(alice, checkout((shop.sneakers.id, 1), (9999, 1))):
        case Error(ProductNotFound() as e):
            assert e.message == "Product 9999 not found"
        case other:
            raise AssertionError(other)

    assert await stock_of(services, shop.sneakers.id) == 50
    assert await count_rows(services, OrderTable) == 0
    assert await count_rows(services, OrderItemTable) == 0
    assert unwrap(await services.ledger.entries()) == []


async def test_declined_payment_aborts_order(services, shop, alice, gateway):
    gateway.approve = False

    match await services.orders.place_order(alice, checkout((shop.sneakers.id, 1))):
        case Error(e):
            assert isinstance(e, BusinessRuleError)
            assert e.message == "Payment was declined"
        case Ok(_):
            raise AssertionError("declined payment produced an order")

    assert await stock_of(services, shop.sneakers.id) == 50


async def test_duplicate_lines_are_merged(services, shop, alice):
    order = unwrap(await services.orders.place_order(
        alice, checkout((shop.lipstick.id, 4), (shop.lipstick.id, 3))
    ))

    assert [(i.product_id, i.quantity) for i in order.items] == [(shop.lipstick.id, 7)]
    assert await stock_of(services, shop.lipstick.id) == 3


async def test_merged_lines_checked_against_stock(services, shop, alice):
    match await services.orders.place_order(alice, checkout((shop.lipstick.id, 6), (shop.lipstick.id, 5))):
        case Error(e):
            assert isinstance(e, InsufficientStock)
        case Ok(_):
            raise AssertionError("oversold through duplicate lines")


async def test_price_snapshot_survives_price_change(services, shop, alice):
    order = unwrap(await services.orders.place_order(alice, checkout((shop.sneakers.id, 2))))
    unwrap(await services.catalog.update_product(shop.sneakers.id, C.ProductChanges(price=12000)))

    again = unwrap(await services.orders.get_order(alice, order.id))
    assert again.items[0].price == 8500
    assert again.items[0].product.price == 12000
    assert again.total == 17000


async def test_inactive_store_rejects_orders(services, shop, alice):
    unwrap(await services.catalog.update_store(shop.store.id, C.StoreChanges(is_active=False)))

    match await services.orders.place_order(alice, checkout((shop.sneakers.id, 1), store_id=shop.store.id)):
        case Error(e):
            assert isinstance(e, NotFoundError)
        case Ok(_):
            raise AssertionError("inactive store accepted an order")


async def test_product_from_another_store_is_rejected(services, shop, alice):
    other = unwrap(await services.catalog.create_store(C.NewStore("Glow", "glow")))

    match await services.orders.place_order(alice, checkout((shop.sneakers.id, 1), store_id=other.id)):
        case Error(e):
            assert isinstance(e, BusinessRuleError)
        case Ok(_):
            raise AssertionError("cross-store order accepted")


@pytest.mark.parametrize(
    ("request_", "message"),
    [
        (O.PlaceOrder(items=(), payment_method=O.PaymentMethod.CARD), "Order must contain at least one item"),
        (O.PlaceOrder(items=(O.LineItem(1, 0),), payment_method=O.PaymentMethod.CARD), "Quantity must be at least 1"),
        (
            O.PlaceOrder(items=(O.LineItem(1, 1),), payment_method=O.PaymentMethod.MPESA, payment_phone_number="12ab"),
            "Invalid phone number",
        ),
    ],
)
async def test_invalid_requests_fail_before_io(services, alice, request_, message):
    match await services.orders.place_order(alice, request_):
        case Error(ValidationError() as e):
            assert e.message == message
        case other:
            raise AssertionError(other)


def test_validate_request_cleans_phone_and_merges():
    match O.validate_request(O.PlaceOrder(
        items=(O.LineItem(2, 1), O.LineItem(1, 1), O.LineItem(2, 2)),
        payment_method="card",
        payment_phone_number="+254 700 000 000",
    )):
        case Ok(valid):
            assert valid.items == (O.LineItem(2, 3), O.LineItem(1, 1))
            assert valid.payment_method is O.PaymentMethod.CARD
            assert valid.payment_phone_number == "+254700000000"
        case Error(e):
            raise AssertionError(e)


# ═══════════════════════════════════════════════════════════════════════════════
# Queries
# ═══════════════════════════════════════════════════════════════════════════════


async def test_customers_only_see_their_own_orders(services, shop, alice, bob, admin):
    mine = unwrap(await services.orders.place_order(alice, checkout((shop.sneakers.id, 1))))
    theirs = unwrap(await services.orders.place_order(bob, checkout((shop.lipstick.id, 1))))

    assert [o.id for o in unwrap(await services.orders.list_orders(alice))] == [mine.id]
    # userId filter is ignored for customers
    assert [o.id for o in unwrap(await services.orders.list_orders(alice, O.OrderFilter(user_id="bob")))] == [mine.id]
    assert [o.id for o in unwrap(await services.orders.list_orders(admin))] == [theirs.id, mine.id]
    assert [o.id for o in unwrap(await services.orders.list_orders(admin, O.OrderFilter(user_id="bob")))] == [theirs.id]

    match await services.orders.get_order(alice, theirs.id):
        case Error(e):
            assert isinstance(e, NotFoundError)
        case Ok(_):
            raise AssertionError("customer read someone else's order")
    assert unwrap(await services.orders.get_order(admin, theirs.id)).user_id == "bob"


async def test_list_orders_by_store(services, shop, alice, admin):
    in_store = unwrap(await services.orders.place_order(alice, checkout((shop.sneakers.id, 1), store_id=shop.store.id)))
    unwrap(await services.orders.place_order(alice, checkout((shop.sneakers.id, 1))))

    orders = unwrap(await services.orders.list_orders(admin, O.OrderFilter(store_id=shop.store.id)))
    assert [o.id for o in orders] == [in_store.id]
