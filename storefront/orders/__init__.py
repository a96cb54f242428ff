"""
Orders — checkout, status transitions, order queries.

    from storefront import orders as O

    engine = O.OrderEngine(session_factory, transitions=O.TransitionMode.STRICT)

    result = await engine.place_order(
        identity,
        O.PlaceOrder(
            items=(O.LineItem(product_id=7, quantity=2),),
            payment_method=O.PaymentMethod.MPESA,
            payment_phone_number="254700000000",
        ),
    )

    await engine.update_status(admin, order_id, O.OrderStatus.SHIPPED)
"""

from storefront.payments import PaymentMethod, PaymentStatus
from storefront.orders._types import (
    OrderStatus,
    REVENUE_STATUSES,
    LineItem,
    PlaceOrder,
    OrderFilter,
    OrderItem,
    Order,
)
from storefront.orders._transitions import (
    TransitionMode,
    allowed_targets,
    check_transition,
)
from storefront.orders._engine import (
    merge_lines,
    validate_request,
    to_order,
    OrderEngine,
)

__all__ = (
    "PaymentMethod",
    "PaymentStatus",
    "OrderStatus",
    "REVENUE_STATUSES",
    "LineItem",
    "PlaceOrder",
    "OrderFilter",
    "OrderItem",
    "Order",
    "TransitionMode",
    "allowed_targets",
    "check_transition",
    "merge_lines",
    "validate_request",
    "to_order",
    "OrderEngine",
)
