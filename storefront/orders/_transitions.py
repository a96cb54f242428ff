"""
Order status transition policy.

    STRICT (default)            FREE
    ────────────────            ────
    pending   → paid            any → any
    paid      → shipped
    shipped   → delivered
    non-terminal → cancelled

Terminal states (delivered, cancelled) have no outgoing edges in STRICT mode.
"""

from __future__ import annotations

from enum import StrEnum

from kungfu import Result, Ok, Error

from storefront.errors import InvalidTransition
from storefront.orders._types import OrderStatus


class TransitionMode(StrEnum):
    STRICT = "strict"
    FREE = "free"


_FORWARD: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def allowed_targets(current: OrderStatus, mode: TransitionMode) -> frozenset[OrderStatus]:
    if mode is TransitionMode.FREE:
        return frozenset(OrderStatus)
    return _FORWARD[current]


def check_transition(
    current: OrderStatus,
    target: OrderStatus,
    mode: TransitionMode = TransitionMode.STRICT,
) -> Result[OrderStatus, InvalidTransition]:
    if target in allowed_targets(current, mode):
        return Ok(target)
    return Error(InvalidTransition(current.value, target.value))


__all__ = (
    "TransitionMode",
    "allowed_targets",
    "check_transition",
)
