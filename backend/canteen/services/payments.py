"""Payment Service — gateway checkout, verification, offline records and refunds.

Invariants:
    - Amounts sent to the gateway are the order total in minor units
    - A gateway payment id is saved at most once; repeats return the saved row
    - Only payments whose gateway status is captured/authorized are stored
    - refund_payment marks the payment refunded only after the gateway accepts
    - Offline payments (no gateway payment id) are never refunded here
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.config import get_settings
from canteen.core.domain_types import PaymentStatus
from canteen.core.errors import BusinessRuleError
from canteen.core.order_rules import to_minor_units
from canteen.db.base import utcnow
from canteen.infrastructure.payment_gateway import PaymentGateway
from canteen.models import Order, Payment, User
from canteen.schemas.payments import OfflinePaymentCreate, PaymentVerify

logger = logging.getLogger(__name__)

SETTLED_GATEWAY_STATUSES = frozenset({"captured", "authorized"})


def _date_and_time(now: datetime, payment_time: str | None) -> tuple[str, str]:
    return now.date().isoformat(), payment_time or now.strftime("%H:%M:%S")


async def latest_payment_for_order(db: AsyncSession, order_id) -> Payment | None:
    return (
        await db.execute(
            select(Payment)
            .where(Payment.order_id == order_id)
            .order_by(Payment.created_at.desc())
            .limit(1),
        )
    ).scalar_one_or_none()


async def _payment_by_gateway_id(db: AsyncSession, gateway_payment_id: str) -> Payment | None:
    return (
        await db.execute(
            select(Payment).where(Payment.gateway_payment_id == gateway_payment_id),
        )
    ).scalar_one_or_none()


async def create_gateway_order(
    gateway: PaymentGateway, order: Order, user: User,
) -> dict[str, Any]:
    settings = get_settings()
    gateway_order = await gateway.create_order(
        to_minor_units(order.total_amount),
        settings.currency,
        receipt=str(order.id),
        notes={"email": user.email, "orderId": str(order.id)},
    )
    logger.info(
        "Gateway order created",
        extra={"order_id": str(order.id), "payment_id": gateway_order.get("id")},
    )
    return {
        "message": "Payment order created",
        "order": gateway_order,
        "key_id": gateway.key_id,
        "prefill": {"name": user.name, "email": user.email, "contact": user.phone_no},
    }


async def verify_payment(
    db: AsyncSession, gateway: PaymentGateway, order: Order,
    user: User, body: PaymentVerify,
) -> tuple[Payment, bool]:
    """Verify and store a gateway payment. Returns (payment, already_processed)."""
    existing = await _payment_by_gateway_id(db, body.razorpay_payment_id)
    if existing is not None:
        return existing, True

    if not await gateway.verify_signature(
        body.razorpay_order_id, body.razorpay_payment_id, body.razorpay_signature,
    ):
        raise BusinessRuleError(
            "Invalid payment signature", "INVALID_PAYMENT_SIGNATURE",
        )

    details = await gateway.fetch_payment(body.razorpay_payment_id)
    if details.get("status") not in SETTLED_GATEWAY_STATUSES:
        raise BusinessRuleError(
            "Payment not completed", "PAYMENT_NOT_COMPLETED",
            {"status": details.get("status")},
        )

    payment_date, payment_time = _date_and_time(utcnow(), body.payment_time)
    payment = Payment(
        order_id=order.id,
        payment_date=payment_date,
        payment_time=payment_time,
        payment_method=body.payment_method.value,
        payment_status=PaymentStatus.COMPLETED.value,
        transaction_id=body.razorpay_payment_id,
        email=user.email,
        amount=order.total_amount,
        gateway_order_id=body.razorpay_order_id,
        gateway_payment_id=body.razorpay_payment_id,
        gateway_signature=body.razorpay_signature,
    )
    db.add(payment)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent verify of the same payment won the insert
        await db.rollback()
        existing = await _payment_by_gateway_id(db, body.razorpay_payment_id)
        if existing is None:
            raise
        return existing, True
    await db.refresh(payment)
    logger.info(
        "Payment verified",
        extra={"order_id": str(order.id), "payment_id": body.razorpay_payment_id},
    )
    return payment, False


async def record_offline_payment(
    db: AsyncSession, order: Order, user: User, body: OfflinePaymentCreate,
) -> Payment:
    payment_date, payment_time = _date_and_time(utcnow(), body.payment_time)
    payment = Payment(
        order_id=order.id,
        payment_date=payment_date,
        payment_time=payment_time,
        payment_method=body.payment_method.value,
        payment_status=PaymentStatus.PENDING.value,
        transaction_id=body.transaction_id,
        email=user.email,
        amount=order.total_amount,
    )
    db.add(payment)
    await db.commit()
    await db.refresh(payment)
    return payment


async def refund_payment(
    db: AsyncSession, gateway: PaymentGateway, payment: Payment,
    commit: bool = True,
) -> dict[str, Any]:
    """Refund through the gateway, then mark the payment refunded."""
    if payment.payment_status == PaymentStatus.REFUNDED.value:
        raise BusinessRuleError("Payment already refunded", "PAYMENT_ALREADY_REFUNDED")
    if not payment.gateway_payment_id:
        raise BusinessRuleError(
            "Only online payments can be refunded", "PAYMENT_NOT_REFUNDABLE",
            {"paymentMethod": payment.payment_method},
        )
    refund = await gateway.refund(
        payment.gateway_payment_id, to_minor_units(payment.amount),
    )
    payment.payment_status = PaymentStatus.REFUNDED.value
    if commit:
        await db.commit()
        await db.refresh(payment)
    logger.info(
        "Payment refunded",
        extra={"order_id": str(payment.order_id), "payment_id": payment.gateway_payment_id},
    )
    return refund
