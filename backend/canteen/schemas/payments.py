"""Payment Schemas — gateway order creation, verification and payment views."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from canteen.core.domain_types import PaymentMethod
from canteen.schemas.common import CamelModel


class PaymentOrderCreate(CamelModel):
    order_id: UUID


class PaymentOrderResponse(CamelModel):
    message: str
    order: dict[str, Any]
    key_id: str
    prefill: dict[str, str]


class PaymentVerify(CamelModel):
    order_id: UUID
    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)
    payment_method: PaymentMethod = PaymentMethod.RAZORPAY
    payment_time: str | None = Field(None, max_length=20)


class OfflinePaymentCreate(CamelModel):
    order_id: UUID
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_time: str | None = Field(None, max_length=20)
    transaction_id: str | None = Field(None, max_length=100)


class PaymentResponse(CamelModel):
    id: UUID
    order_id: UUID
    payment_date: str
    payment_time: str
    payment_method: str
    payment_status: str
    transaction_id: str | None = None
    email: str
    amount: float
    razorpay_order_id: str | None = Field(None, validation_alias="gateway_order_id")
    razorpay_payment_id: str | None = Field(None, validation_alias="gateway_payment_id")
    created_at: datetime | None = None


class PaymentResult(CamelModel):
    message: str
    payment: PaymentResponse
