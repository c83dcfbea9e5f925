"""Order Service — placement, cancellation and staff status changes.

Invariants:
    - Totals are computed from current menu prices plus the priority fee
    - Every ordered item must exist, belong to the canteen and be available
    - Exam-priority orders from students pass validate_exam_priority first
    - Cancelling an online-paid order refunds it through the gateway
    - A delivered order is auto-completed later only if still delivered

Design Decisions:
    - Auto-completion runs as a FastAPI background task with its own session
      (the request session is closed by then)
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.config import get_settings
from canteen.core.domain_types import OrderStatus
from canteen.core.errors import (
    BusinessRuleError, CanteenError, RequestValidationFailed, ResourceNotFoundError,
)
from canteen.core.order_rules import (
    check_cancellable, check_status_update, is_online_paid, order_subtotal,
)
from canteen.core.priority import (
    priority_fee_for, requires_exam_check, validate_exam_priority,
)
from canteen.db.base import utcnow
from canteen.infrastructure import database
from canteen.infrastructure.payment_gateway import PaymentGateway
from canteen.models import Canteen, ExamDetails, MenuItem, Order, OrderItem, User
from canteen.schemas.orders import OrderCreate
from canteen.services.payments import latest_payment_for_order, refund_payment

logger = logging.getLogger(__name__)


async def place_order(db: AsyncSession, user: User, body: OrderCreate) -> Order:
    if not (body.delivery_address or "").strip():
        raise RequestValidationFailed(
            "Delivery address is required", field="deliveryAddress",
        )

    canteen = await db.get(Canteen, body.canteen_id)
    if canteen is None:
        raise ResourceNotFoundError("Canteen", str(body.canteen_id))
    if not canteen.availability:
        raise BusinessRuleError(
            "This canteen is currently closed. You cannot place orders at this time.",
            "CANTEEN_CLOSED",
        )

    ids = {line.item_id for line in body.items}
    menu = {
        m.id: m for m in (
            await db.execute(select(MenuItem).where(MenuItem.id.in_(ids)))
        ).scalars().all()
    }
    unavailable = []
    for line in body.items:
        item = menu.get(line.item_id)
        if item is None or item.canteen_id != canteen.id or not item.availability:
            unavailable.append({
                "itemId": str(line.item_id),
                "name": item.item_name if item else "Unknown Item",
            })
    if unavailable:
        raise BusinessRuleError(
            "Some items in your order are no longer available",
            "ITEMS_UNAVAILABLE", {"unavailableItems": unavailable},
        )

    reason = body.priority_reason.value if body.priority_reason else None
    if requires_exam_check(body.priority, reason, user.role):
        exam = await db.get(ExamDetails, body.exam_id) if body.exam_id else None
        validate_exam_priority(user, body.exam_id, exam)

    fee = priority_fee_for(body.priority, get_settings().priority_fee)
    subtotal = order_subtotal(
        (menu[line.item_id].price, line.quantity) for line in body.items
    )
    now = utcnow()
    order = Order(
        email=user.email,
        order_date=body.order_date or now.date().isoformat(),
        order_time=body.order_time or now.strftime("%H:%M:%S"),
        status=OrderStatus.PENDING.value,
        total_amount=round(subtotal + fee, 2),
        canteen_id=canteen.id,
        exam_id=body.exam_id,
        priority=body.priority,
        priority_reason=reason if body.priority else None,
        priority_details=body.priority_details if body.priority else None,
        pickup_time=body.pickup_time,
        special_instructions=body.special_instructions,
        delivery_address=body.delivery_address.strip(),
        priority_fee=fee,
        items=[
            OrderItem(
                menu_item_id=line.item_id,
                item_name=menu[line.item_id].item_name,
                quantity=line.quantity,
                price=menu[line.item_id].price,
            )
            for line in body.items
        ],
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)

    if order.priority:
        logger.warning(
            f"PRIORITY ORDER ALERT: order {order.id} reason {reason}",
            extra={
                "order_id": str(order.id), "canteen_id": str(canteen.id),
                "priority_reason": reason,
            },
        )
    return order


async def _online_payment(db: AsyncSession, order: Order):
    payment = await latest_payment_for_order(db, order.id)
    if payment and is_online_paid(payment.payment_status, payment.payment_method):
        return payment
    return None


async def update_status(
    db: AsyncSession, gateway: PaymentGateway, order: Order, new_status: OrderStatus,
) -> tuple[Order, bool]:
    """Staff/admin status change. Returns (order, refunded)."""
    payment = await _online_payment(db, order)
    check_status_update(order.status, new_status.value, payment is not None)

    refunded = False
    if new_status == OrderStatus.CANCELLED and payment is not None:
        # Gateway failure propagates; order stays unchanged
        await refund_payment(db, gateway, payment, commit=False)
        refunded = True

    order.status = new_status.value
    await db.commit()
    await db.refresh(order)
    logger.info(
        f"Order status -> {order.status}", extra={"order_id": str(order.id)},
    )
    return order, refunded


async def cancel_order(
    db: AsyncSession, gateway: PaymentGateway, order: Order,
) -> tuple[Order, bool, str | None]:
    """Customer/admin cancellation. Returns (order, refunded, refund_error)."""
    check_cancellable(order.status)
    order_id = order.id
    order.status = OrderStatus.CANCELLED.value
    await db.commit()

    refunded, refund_error = False, None
    payment = await _online_payment(db, order)
    if payment is not None:
        try:
            await refund_payment(db, gateway, payment)
            refunded = True
        except CanteenError as e:
            # refund_payment writes nothing before the gateway call succeeds
            refund_error = e.message
            logger.error(
                f"Refund failed after cancellation: {e.message}",
                extra={"order_id": str(order_id), "error_code": e.code},
            )
    await db.refresh(order)
    return order, refunded, refund_error


async def auto_complete_order(order_id: UUID, delay_seconds: float) -> None:
    """Background task: delivered -> completed after delay_seconds."""
    if delay_seconds > 0:
        await asyncio.sleep(delay_seconds)
    async with database.db_manager.session() as db:
        order = await db.get(Order, order_id)
        if order is None or order.status != OrderStatus.DELIVERED.value:
            return
        order.status = OrderStatus.COMPLETED.value
        await db.commit()
        logger.info("Order auto-completed", extra={"order_id": str(order_id)})
