import pytest
from kungfu import Ok, Error

from storefront import catalog as C
from storefront import orders as O
from storefront.errors import (
    InsufficientStock,
    InvalidTransition,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from storefront.lift import unwrap
from storefront.services import Services

S = O.OrderStatus


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (S.PENDING, S.PAID),
        (S.PAID, S.SHIPPED),
        (S.SHIPPED, S.DELIVERED),
        (S.PENDING, S.CANCELLED),
        (S.PAID, S.CANCELLED),
        (S.SHIPPED, S.CANCELLED),
    ],
)
def test_strict_allows_forward_and_cancel(current, target):
    match O.check_transition(current, target):
        case Ok(allowed):
            assert allowed is target
        case Error(e):
            raise AssertionError(e)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (S.PAID, S.PENDING),
        (S.PAID, S.DELIVERED),
        (S.DELIVERED, S.CANCELLED),
        (S.CANCELLED, S.PAID),
        (S.SHIPPED, S.SHIPPED),
    ],
)
def test_strict_rejects_backward_skip_and_terminal(current, target):
    match O.check_transition(current, target):
        case Error(InvalidTransition() as e):
            assert (e.current, e.target) == (current.value, target.value)
        case other:
            raise AssertionError(other)


def test_free_mode_allows_anything():
    for current in S:
        assert O.allowed_targets(current, O.TransitionMode.FREE) == frozenset(S)


def place(*lines: tuple[int, int]) -> O.PlaceOrder:
    return O.PlaceOrder(
        items=tuple(O.LineItem(pid, qty) for pid, qty in lines),
        payment_method=O.PaymentMethod.CARD,
    )


async def stock_of(services, product_id: int) -> int:
    return unwrap(await services.catalog.get_product(product_id)).stock


# ═══════════════════════════════════════════════════════════════════════════════
# Engine
# ═══════════════════════════════════════════════════════════════════════════════


async def test_happy_path(services, shop, alice, admin):
    order = unwrap(await services.orders.place_order(alice, place((shop.sneakers.id, 1))))

    shipped = unwrap(await services.orders.update_status(admin, order.id, S.SHIPPED))
    delivered = unwrap(await services.orders.update_status(admin, order.id, "delivered"))

    assert shipped.status is S.SHIPPED
    assert delivered.status is S.DELIVERED
    assert await stock_of(services, shop.sneakers.id) == 49


async def test_cancel_restocks_and_logs(services, shop, alice, admin):
    order = unwrap(await services.orders.place_order(alice, place((shop.sneakers.id, 3), (shop.lipstick.id, 2))))

    cancelled = unwrap(await services.orders.update_status(admin, order.id, S.CANCELLED))

    assert cancelled.status is S.CANCELLED
    assert await stock_of(services, shop.sneakers.id) == 50
    assert await stock_of(services, shop.lipstick.id) == 10
    entries = unwrap(await services.ledger.entries(shop.sneakers.id))
    assert [(e.change, e.reason) for e in entries] == [
        (3, f"Order #{order.id} cancelled"),
        (-3, f"Order #{order.id}"),
    ]


async def test_strict_mode_refuses_leaving_cancelled(services, shop, alice, admin):
    order = unwrap(await services.orders.place_order(alice, place((shop.sneakers.id, 1))))
    unwrap(await services.orders.update_status(admin, order.id, S.CANCELLED))

    match await services.orders.update_status(admin, order.id, S.PAID):
        case Error(e):
            assert isinstance(e, InvalidTransition)
        case Ok(_):
            raise AssertionError("left a terminal state")
    assert await stock_of(services, shop.sneakers.id) == 50


async def test_only_admins_change_status(services, shop, alice):
    order = unwrap(await services.orders.place_order(alice, place((shop.sneakers.id, 1))))

    match await services.orders.update_status(alice, order.id, S.SHIPPED):
        case Error(e):
            assert isinstance(e, UnauthorizedError)
        case Ok(_):
            raise AssertionError("customer changed an order status")


async def test_unknown_status_and_missing_order(services, admin):
    match await services.orders.update_status(admin, 1, "lost"):
        case Error(e):
            assert isinstance(e, ValidationError)
        case Ok(_):
            raise AssertionError("unknown status accepted")

    match await services.orders.update_status(admin, 999, S.SHIPPED):
        case Error(e):
            assert isinstance(e, NotFoundError)
        case Ok(_):
            raise AssertionError("missing order updated")


# ═══════════════════════════════════════════════════════════════════════════════
# Free mode
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
async def free_services(settings, gateway):
    services = await Services.open(settings.with_overrides(order_transitions=O.TransitionMode.FREE), gateway)
    try:
        yield services
    finally:
        await services.close()


async def test_free_mode_reopening_withdraws_stock_again(free_services, alice, admin):
    product = unwrap(await free_services.catalog.create_product(C.NewProduct("Boot", 100, "Shoes", stock=2)))
    order = unwrap(await free_services.orders.place_order(alice, place((product.id, 2))))
    unwrap(await free_services.orders.update_status(admin, order.id, S.CANCELLED))
    assert await stock_of(free_services, product.id) == 2

    reopened = unwrap(await free_services.orders.update_status(admin, order.id, S.SHIPPED))
    assert reopened.status is S.SHIPPED
    assert await stock_of(free_services, product.id) == 0


async def test_free_mode_reopen_fails_when_stock_is_gone(free_services, alice, bob, admin):
    product = unwrap(await free_services.catalog.create_product(C.NewProduct("Boot", 100, "Shoes", stock=1)))
    first = unwrap(await free_services.orders.place_order(alice, place((product.id, 1))))
    unwrap(await free_services.orders.update_status(admin, first.id, S.CANCELLED))
    unwrap(await free_services.orders.place_order(bob, place((product.id, 1))))

    match await free_services.orders.update_status(admin, first.id, S.PAID):
        case Error(e):
            assert isinstance(e, InsufficientStock)
        case Ok(_):
            raise AssertionError("reopened an order without stock")

    assert unwrap(await free_services.orders.get_order(admin, first.id)).status is S.CANCELLED
    assert await stock_of(free_services, product.id) == 0
