"""
Order engine: checkout, status changes, order queries.

place_order() runs as one database transaction:

    validate request (no I/O)
         │
         ▼
    read products ──► missing?        → ProductNotFound
         │        ──► wrong store?    → BusinessRuleError
         │        ──► stock < qty?    → InsufficientStock
         ▼
    total = Σ price × qty, snapshot prices
         │
         ▼
    INSERT order ─► conditional stock UPDATE per product (ascending id)
                 ─► append ledger rows
         │
         ▼
    charge mocked gateway ─► INSERT order items
         │
         ▼
    COMMIT  (any raise above rolls everything back)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime
from typing import Any, cast

from sqlalchemy import Select, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from kungfu import Result, Ok, Error

from storefront import inventory as Inv
from storefront.auth import Identity, require_admin
from storefront.catalog import to_product
from storefront.db import (
    SessionFactory,
    StoreTable,
    ProductTable,
    OrderTable,
    OrderItemTable,
)
from storefront.errors import (
    StorefrontError,
    ValidationError,
    NotFoundError,
    ProductNotFound,
    BusinessRuleError,
    InsufficientStock,
    InvalidTransition,
)
from storefront.lift import guarded, unwrap
from storefront.payments import (
    PaymentGateway,
    PaymentMethod,
    PaymentStatus,
    MockPaymentGateway,
    check_phone_number,
)
from storefront.orders._types import (
    OrderStatus,
    REVENUE_STATUSES,
    LineItem,
    PlaceOrder,
    OrderFilter,
    OrderItem,
    Order,
)
from storefront.orders._transitions import TransitionMode, check_transition

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Request Validation (pure, no I/O)
# ═══════════════════════════════════════════════════════════════════════════════


def merge_lines(items: Sequence[LineItem]) -> tuple[LineItem, ...]:
    """Sum quantities of repeated products, keeping first-seen order."""
    merged: dict[int, int] = {}
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return tuple(LineItem(pid, qty) for pid, qty in merged.items())


def validate_request(request: PlaceOrder) -> Result[PlaceOrder, ValidationError]:
    if not request.items:
        return Error(ValidationError("Order must contain at least one item"))
    for item in request.items:
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
            return Error(ValidationError("Quantity must be an integer"))
        if item.quantity < 1:
            return Error(ValidationError("Quantity must be at least 1"))
    try:
        method = PaymentMethod(request.payment_method)
    except ValueError:
        return Error(ValidationError(f"Unsupported payment method: {request.payment_method}"))
    match check_phone_number(request.payment_phone_number):
        case Error(e):
            return Error(e)
        case Ok(phone):
            return Ok(PlaceOrder(
                items=merge_lines(request.items),
                payment_method=method,
                store_id=request.store_id,
                payment_phone_number=phone,
            ))


# ═══════════════════════════════════════════════════════════════════════════════
# Row → Domain
# ═══════════════════════════════════════════════════════════════════════════════


def to_order(row: OrderTable, items: Sequence[OrderItem] = ()) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        store_id=row.store_id,
        status=OrderStatus(row.status),
        total=row.total,
        payment_method=PaymentMethod(row.payment_method),
        payment_status=PaymentStatus(row.payment_status),
        created_at=row.created_at,
        items=tuple(items),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Order Engine
# ═══════════════════════════════════════════════════════════════════════════════


class OrderEngine:
    """
    Example:
        engine = OrderEngine(session_factory)

        result = await engine.place_order(
            Identity.customer("user-1"),
            PlaceOrder(items=(LineItem(7, 2),), payment_method=PaymentMethod.MPESA),
        )
        match result:
            case Ok(order):
                print(order.total)
            case Error(InsufficientStock() as e):
                print(e.available, e.requested)
            case Error(e):
                print(e.message)
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        transitions: TransitionMode = TransitionMode.STRICT,
        gateway: PaymentGateway | None = None,
    ) -> None:
        self._session = session_factory
        self._transitions = transitions
        self._gateway = gateway or MockPaymentGateway()

    # ───────────────────────────────────────────────────────────────────────────
    # Checkout
    # ───────────────────────────────────────────────────────────────────────────

    async def place_order(
        self,
        identity: Identity,
        request: PlaceOrder,
    ) -> Result[Order, StorefrontError]:
        match validate_request(request):
            case Error(e):
                logger.warning("Rejected order from %s: %s", identity.user_id, e.message)
                return Error(e)
            case Ok(valid):
                pass

        result = await guarded(lambda: self._place(identity, valid))
        match result:
            case Ok(order):
                logger.info(
                    "Order #%s placed by %s: %s item(s), total %s",
                    order.id, identity.user_id, len(order.items), order.total,
                )
            case Error(e):
                logger.warning("Rejected order from %s: %s", identity.user_id, e.message)
        return result

    async def _place(self, identity: Identity, request: PlaceOrder) -> Order:
        async with self._session() as session:
            async with session.begin():
                if request.store_id is not None:
                    store = await session.get(StoreTable, request.store_id)
                    if store is None or not store.is_active:
                        raise NotFoundError(
                            "Store", request.store_id, "Store not found or inactive"
                        )

                # Phase 1: read and validate every line before writing anything
                total = 0
                prices: dict[int, int] = {}
                for line in request.items:
                    product = await session.get(ProductTable, line.product_id)
                    if product is None:
                        raise ProductNotFound(line.product_id)
                    if request.store_id is not None and product.store_id not in (None, request.store_id):
                        raise BusinessRuleError(f"{product.name} is not sold by this store")
                    if product.stock < line.quantity:
                        raise InsufficientStock(product.id, product.name, product.stock, line.quantity)
                    prices[product.id] = product.price
                    total += product.price * line.quantity

                # Phase 2: writes
                order = OrderTable(
                    user_id=identity.user_id,
                    store_id=request.store_id,
                    status=OrderStatus.PAID.value,
                    total=total,
                    payment_method=request.payment_method.value,
                    payment_status=PaymentStatus.PAID.value,
                    created_at=datetime.now(),
                )
                session.add(order)
                await session.flush()

                reason = Inv.order_reason(order.id)
                for line in sorted(request.items, key=lambda item: item.product_id):
                    await Inv.withdraw(session, line.product_id, line.quantity, reason)

                # Charged only once the stock is secured
                receipt = await self._gateway.charge(
                    request.payment_method, total, request.payment_phone_number
                )
                if not receipt.approved:
                    raise BusinessRuleError("Payment was declined")

                session.add_all([
                    OrderItemTable(
                        order_id=order.id,
                        product_id=line.product_id,
                        quantity=line.quantity,
                        price=prices[line.product_id],
                    )
                    for line in request.items
                ])
                await session.flush()
                order_id = order.id

        return await self._get(order_id)

    # ───────────────────────────────────────────────────────────────────────────
    # Status
    # ───────────────────────────────────────────────────────────────────────────

    async def update_status(
        self,
        identity: Identity,
        order_id: int,
        status: OrderStatus | str,
    ) -> Result[Order, StorefrontError]:
        """
        Admin-only status change.

        Entering ``cancelled`` puts the items back in stock; leaving it (FREE
        mode only) takes them out again and fails if the stock is gone.
        """
        match require_admin(identity):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass
        try:
            target = OrderStatus(status)
        except ValueError:
            return Error(ValidationError(f"Unknown order status: {status}"))

        result = await guarded(lambda: self._update_status(order_id, target))
        match result:
            case Ok(order):
                logger.info("Order #%s set to %s by %s", order.id, order.status, identity.user_id)
            case Error(e):
                logger.warning("Status change for order #%s refused: %s", order_id, e.message)
        return result

    async def _update_status(self, order_id: int, target: OrderStatus) -> Order:
        async with self._session() as session:
            async with session.begin():
                row = await session.get(OrderTable, order_id)
                if row is None:
                    raise NotFoundError("Order", order_id)
                current = OrderStatus(row.status)
                unwrap(check_transition(current, target, self._transitions))

                # Compare-and-swap: a concurrent change of the same order matches zero rows
                values: dict[str, str] = {"status": target.value}
                if target in REVENUE_STATUSES:
                    values["payment_status"] = PaymentStatus.PAID.value
                cursor = cast(CursorResult[Any], await session.execute(
                    update(OrderTable)
                    .where(OrderTable.id == order_id, OrderTable.status == current.value)
                    .values(**values)
                    .execution_options(synchronize_session=False)
                ))
                if cursor.rowcount != 1:
                    latest = (
                        await session.execute(
                            select(OrderTable.status).where(OrderTable.id == order_id)
                        )
                    ).scalar_one()
                    raise InvalidTransition(latest, target.value)

                if current is not target:
                    items = (
                        await session.execute(
                            select(OrderItemTable)
                            .where(OrderItemTable.order_id == order_id)
                            .order_by(OrderItemTable.product_id)
                        )
                    ).scalars().all()
                    if target is OrderStatus.CANCELLED:
                        for item in items:
                            await Inv.restock(
                                session, item.product_id, item.quantity,
                                Inv.cancellation_reason(order_id),
                            )
                    elif current is OrderStatus.CANCELLED:
                        for item in items:
                            await Inv.withdraw(
                                session, item.product_id, item.quantity,
                                Inv.order_reason(order_id),
                            )

        return await self._get(order_id)

    # ───────────────────────────────────────────────────────────────────────────
    # Queries
    # ───────────────────────────────────────────────────────────────────────────

    async def get_order(self, identity: Identity, order_id: int) -> Result[Order, StorefrontError]:
        """Owners and admins see the order; everyone else gets NotFoundError."""
        result = await guarded(lambda: self._get(order_id))
        match result:
            case Ok(order) if not identity.is_admin and order.user_id != identity.user_id:
                return Error(NotFoundError("Order", order_id))
            case _:
                return result

    async def list_orders(
        self,
        identity: Identity,
        criteria: OrderFilter = OrderFilter(),
    ) -> Result[list[Order], StorefrontError]:
        """Newest first. Non-admins only ever see their own orders."""
        user_id = criteria.user_id if identity.is_admin else identity.user_id
        stmt = select(OrderTable).order_by(OrderTable.created_at.desc(), OrderTable.id.desc())
        if user_id is not None:
            stmt = stmt.where(OrderTable.user_id == user_id)
        if criteria.store_id is not None:
            stmt = stmt.where(OrderTable.store_id == criteria.store_id)
        return await guarded(lambda: self._list(stmt))

    async def _get(self, order_id: int) -> Order:
        orders = await self._list(select(OrderTable).where(OrderTable.id == order_id))
        if not orders:
            raise NotFoundError("Order", order_id)
        return orders[0]

    async def _list(self, stmt: Select[tuple[OrderTable]]) -> list[Order]:
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            items = await self._items_for(session, [r.id for r in rows])
            return [to_order(r, items[r.id]) for r in rows]

    async def _items_for(
        self,
        session: AsyncSession,
        order_ids: list[int],
    ) -> dict[int, list[OrderItem]]:
        by_order: dict[int, list[OrderItem]] = defaultdict(list)
        if not order_ids:
            return by_order
        rows = (
            await session.execute(
                select(OrderItemTable, ProductTable)
                .outerjoin(ProductTable, ProductTable.id == OrderItemTable.product_id)
                .where(OrderItemTable.order_id.in_(order_ids))
                .order_by(OrderItemTable.id)
            )
        ).all()
        for item, product in rows:
            by_order[item.order_id].append(OrderItem(
                id=item.id,
                order_id=item.order_id,
                product_id=item.product_id,
                quantity=item.quantity,
                price=item.price,
                product=to_product(product) if product is not None else None,
            ))
        return by_order


__all__ = (
    "merge_lines",
    "validate_request",
    "to_order",
    "OrderEngine",
)
