"""Payment Routes — gateway checkout, verification, offline records, refunds.

Invariants:
    - Checkout and verification are for the order's owner only
    - Verification is idempotent per gateway payment id
    - GET /order/{id} answers 404 with isOnlinePaid=false when unpaid
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import (
    Principal, get_current_principal, get_payment_gateway, require_admin,
    require_admin_or_staff, require_user,
)
from canteen.core.domain_types import PrincipalRole
from canteen.core.errors import PermissionDeniedError, ResourceNotFoundError
from canteen.core.order_rules import is_online_paid
from canteen.infrastructure.database import get_db
from canteen.infrastructure.payment_gateway import PaymentGateway
from canteen.models import Admin, Order, Payment, User
from canteen.schemas.payments import (
    OfflinePaymentCreate, PaymentOrderCreate, PaymentOrderResponse,
    PaymentResponse, PaymentResult, PaymentVerify,
)
from canteen.services import payments as payment_service
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payments", tags=["payments"])


async def _own_order(db: AsyncSession, order_id: UUID, user: User) -> Order:
    order = await get_or_404(db, Order, order_id, "Order")
    if order.email != user.email:
        raise PermissionDeniedError("You can only pay for your own orders")
    return order


def _check_payment_access(principal: Principal, payment: Payment) -> None:
    if principal.role == PrincipalRole.USER and principal.account.email != payment.email:
        raise PermissionDeniedError("You do not have access to this payment")


@router.post("/create-order", response_model=PaymentOrderResponse)
async def create_payment_order(
    body: PaymentOrderCreate,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    user: User = Depends(require_user),
):
    order = await _own_order(db, body.order_id, user)
    return await payment_service.create_gateway_order(gateway, order, user)


@router.post("/verify", response_model=PaymentResult)
async def verify_payment(
    body: PaymentVerify,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    user: User = Depends(require_user),
):
    order = await _own_order(db, body.order_id, user)
    payment, already = await payment_service.verify_payment(
        db, gateway, order, user, body,
    )
    return PaymentResult(
        message=(
            "Payment already processed" if already
            else "Payment verified and saved successfully"
        ),
        payment=PaymentResponse.model_validate(payment),
    )


@router.post(
    "/", response_model=PaymentResult, status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    body: OfflinePaymentCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    order = await _own_order(db, body.order_id, user)
    payment = await payment_service.record_offline_payment(db, order, user, body)
    return PaymentResult(
        message="Payment recorded successfully",
        payment=PaymentResponse.model_validate(payment),
    )


@router.get("/", response_model=list[PaymentResponse])
async def list_payments(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    rows = (
        await db.execute(select(Payment).order_by(Payment.created_at.desc()))
    ).scalars().all()
    return [PaymentResponse.model_validate(p) for p in rows]


@router.get("/user/{email}", response_model=list[PaymentResponse])
async def list_user_payments(
    email: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if not principal.is_admin and (
        principal.role != PrincipalRole.USER
        or principal.account.email != email.lower()
    ):
        raise PermissionDeniedError("You can only view your own payments")
    rows = (
        await db.execute(
            select(Payment)
            .where(Payment.email == email.lower())
            .order_by(Payment.created_at.desc()),
        )
    ).scalars().all()
    return [PaymentResponse.model_validate(p) for p in rows]


@router.get("/order/{order_id}")
async def get_order_payment(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    payment = await payment_service.latest_payment_for_order(db, order_id)
    if payment is None:
        error = ResourceNotFoundError(
            "Payment", details={"isOnlinePaid": False, "orderId": str(order_id)},
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={**error.to_response(), "isOnlinePaid": False},
        )
    _check_payment_access(principal, payment)
    return {
        "payment": PaymentResponse.model_validate(payment).model_dump(
            mode="json", by_alias=True,
        ),
        "isOnlinePaid": is_online_paid(payment.payment_status, payment.payment_method),
    }


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    payment = await get_or_404(db, Payment, payment_id, "Payment")
    _check_payment_access(principal, payment)
    return PaymentResponse.model_validate(payment)


@router.post("/{payment_id}/refund", response_model=PaymentResult)
async def refund_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    principal: Principal = Depends(require_admin_or_staff),
):
    payment = await get_or_404(db, Payment, payment_id, "Payment")
    if principal.role == PrincipalRole.CANTEEN_STAFF:
        order = await db.get(Order, payment.order_id)
        if order is None or order.canteen_id != principal.account.canteen_id:
            raise PermissionDeniedError("You can only refund your own canteen's orders")
    await payment_service.refund_payment(db, gateway, payment)
    return PaymentResult(
        message="Payment refunded successfully",
        payment=PaymentResponse.model_validate(payment),
    )
