"""Order Routes — placement, listings, status changes and cancellation.

Invariants:
    - Users see only their own orders; staff only their canteen's; admins all
    - Canteen listings are newest first; the priority queue is oldest first
    - Marking an order delivered schedules its auto-completion in the background
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import (
    Principal, get_current_principal, get_payment_gateway, require_admin,
    require_canteen_staff, require_user,
)
from canteen.config import get_settings
from canteen.core.domain_types import OrderStatus, PrincipalRole
from canteen.core.errors import PermissionDeniedError
from canteen.core.order_rules import PRIORITY_QUEUE_EXCLUDED
from canteen.infrastructure.database import get_db
from canteen.infrastructure.payment_gateway import PaymentGateway
from canteen.models import Admin, Canteen, CanteenStaff, Order, User
from canteen.schemas.common import CanteenSummary, UserSummary
from canteen.schemas.orders import (
    OrderCreate, OrderPlacedResponse, OrderResponse, OrderStatusUpdate,
    OrderUpdateResponse,
)
from canteen.services import orders as order_service
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


async def _views(
    db: AsyncSession, orders: Sequence[Order], with_user: bool = False,
) -> list[OrderResponse]:
    """Serialize orders with canteen (and optionally customer) summaries."""
    canteen_ids = {o.canteen_id for o in orders}
    canteens = {
        c.id: c for c in (
            await db.execute(select(Canteen).where(Canteen.id.in_(canteen_ids)))
        ).scalars().all()
    } if canteen_ids else {}
    users = {}
    if with_user and orders:
        emails = {o.email for o in orders}
        users = {
            u.email: u for u in (
                await db.execute(select(User).where(User.email.in_(emails)))
            ).scalars().all()
        }

    views = []
    for order in orders:
        view = OrderResponse.model_validate(order)
        if order.canteen_id in canteens:
            view.canteen = CanteenSummary.model_validate(canteens[order.canteen_id])
        if order.email in users:
            view.user = UserSummary.model_validate(users[order.email])
        views.append(view)
    return views


async def _view(db: AsyncSession, order: Order) -> OrderResponse:
    return (await _views(db, [order], with_user=True))[0]


def _check_staff_canteen(staff: CanteenStaff, canteen_id: UUID) -> None:
    if staff.canteen_id != canteen_id:
        raise PermissionDeniedError("You can only access orders of your own canteen")


def _check_can_view(principal: Principal, order: Order) -> None:
    account = principal.account
    allowed = (
        principal.is_admin
        or (principal.role == PrincipalRole.USER and account.email == order.email)
        or (
            principal.role == PrincipalRole.CANTEEN_STAFF
            and account.canteen_id == order.canteen_id
        )
    )
    if not allowed:
        raise PermissionDeniedError("You do not have access to this order")


@router.post(
    "/", response_model=OrderPlacedResponse, status_code=status.HTTP_201_CREATED,
)
async def place_order(
    body: OrderCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    order = await order_service.place_order(db, user, body)
    return OrderPlacedResponse(
        message="Order created successfully", order=await _view(db, order),
    )


@router.get("/", response_model=list[OrderResponse])
async def list_orders(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    rows = (
        await db.execute(select(Order).order_by(Order.placed_at.desc()))
    ).scalars().all()
    return await _views(db, rows, with_user=True)


async def _orders_for_email(db: AsyncSession, email: str) -> Sequence[Order]:
    return (
        await db.execute(
            select(Order)
            .where(Order.email == email.lower())
            .order_by(Order.placed_at.desc()),
        )
    ).scalars().all()


@router.get("/user/{email}", response_model=list[OrderResponse])
async def list_user_orders(
    email: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    if email.lower() != user.email:
        raise PermissionDeniedError("You can only view your own orders")
    return await _views(db, await _orders_for_email(db, email))


@router.get("/user/{email}/all", response_model=list[OrderResponse])
async def list_user_orders_admin(
    email: str,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    return await _views(db, await _orders_for_email(db, email), with_user=True)


@router.get("/canteen/{canteen_id}", response_model=list[OrderResponse])
async def list_canteen_orders(
    canteen_id: UUID,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    _check_staff_canteen(staff, canteen_id)
    rows = (
        await db.execute(
            select(Order)
            .where(Order.canteen_id == canteen_id)
            .order_by(Order.placed_at.desc()),
        )
    ).scalars().all()
    return await _views(db, rows, with_user=True)


@router.get("/canteen/{canteen_id}/priority", response_model=list[OrderResponse])
async def list_priority_orders(
    canteen_id: UUID,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    _check_staff_canteen(staff, canteen_id)
    rows = (
        await db.execute(
            select(Order)
            .where(
                Order.canteen_id == canteen_id,
                Order.priority.is_(True),
                Order.status.not_in(PRIORITY_QUEUE_EXCLUDED),
            )
            .order_by(Order.placed_at.asc()),
        )
    ).scalars().all()
    return await _views(db, rows, with_user=True)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    order = await get_or_404(db, Order, order_id, "Order")
    _check_can_view(principal, order)
    return await _view(db, order)


async def _change_status(
    db: AsyncSession, gateway: PaymentGateway, background: BackgroundTasks,
    order: Order, new_status: OrderStatus,
) -> OrderUpdateResponse:
    order, refunded = await order_service.update_status(db, gateway, order, new_status)
    message = f"Order status updated to {order.status}"
    if new_status == OrderStatus.DELIVERED:
        background.add_task(
            order_service.auto_complete_order,
            order.id, get_settings().order_auto_complete_seconds,
        )
        message += " and will be automatically marked as completed"
    elif refunded:
        message = "Order cancelled and refund processed successfully"
    return OrderUpdateResponse(
        message=message, order=await _view(db, order), refunded=refunded,
    )


@router.patch("/{order_id}/status", response_model=OrderUpdateResponse)
async def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    order = await get_or_404(db, Order, order_id, "Order")
    _check_staff_canteen(staff, order.canteen_id)
    return await _change_status(db, gateway, background, order, body.status)


@router.patch("/{order_id}/status/admin", response_model=OrderUpdateResponse)
async def update_order_status_admin(
    order_id: UUID,
    body: OrderStatusUpdate,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    _: Admin = Depends(require_admin),
):
    order = await get_or_404(db, Order, order_id, "Order")
    return await _change_status(db, gateway, background, order, body.status)


async def _cancel(
    db: AsyncSession, gateway: PaymentGateway, order: Order,
) -> OrderUpdateResponse:
    order, refunded, refund_error = await order_service.cancel_order(db, gateway, order)
    if refund_error:
        message = "Order cancelled successfully, but refund processing failed"
    elif refunded:
        message = "Order cancelled and refund processed successfully"
    else:
        message = "Order cancelled successfully"
    return OrderUpdateResponse(
        message=message, order=await _view(db, order),
        refunded=refunded, refund_error=refund_error,
    )


@router.patch("/{order_id}/cancel", response_model=OrderUpdateResponse)
async def cancel_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    user: User = Depends(require_user),
):
    order = await get_or_404(db, Order, order_id, "Order")
    if order.email != user.email:
        raise PermissionDeniedError("You can only cancel your own orders")
    return await _cancel(db, gateway, order)


@router.patch("/{order_id}/cancel/admin", response_model=OrderUpdateResponse)
async def cancel_order_admin(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    _: Admin = Depends(require_admin),
):
    order = await get_or_404(db, Order, order_id, "Order")
    return await _cancel(db, gateway, order)
