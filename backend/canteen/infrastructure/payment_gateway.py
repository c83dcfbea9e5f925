"""Payment Gateway — Razorpay client wrapper (orders, signatures, refunds).

Invariants:
    - Every SDK call runs in a worker thread (asyncio.to_thread): the SDK is blocking
    - SDK failures surface as PaymentGatewayError (502), never raw exceptions
    - Signature mismatch returns False instead of raising
    - Amounts passed in minor units (paise)

Design Decisions:
    - PaymentGateway Protocol so routes depend on behavior, tests inject a fake
    - Client built lazily: the app starts without keys, calls fail as "not configured"
"""

import asyncio
import logging
from typing import Any, Protocol

import razorpay
from razorpay.errors import SignatureVerificationError

from canteen.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    key_id: str

    async def create_order(
        self, amount_minor: int, currency: str, receipt: str, notes: dict[str, str],
    ) -> dict[str, Any]: ...

    async def verify_signature(
        self, gateway_order_id: str, gateway_payment_id: str, signature: str,
    ) -> bool: ...

    async def fetch_payment(self, gateway_payment_id: str) -> dict[str, Any]: ...

    async def refund(
        self, gateway_payment_id: str, amount_minor: int,
    ) -> dict[str, Any]: ...


class RazorpayGateway:
    """PaymentGateway backed by the Razorpay SDK."""

    def __init__(self, key_id: str, key_secret: str):
        self.key_id = key_id
        self._key_secret = key_secret
        self._client: razorpay.Client | None = None

    @property
    def client(self) -> razorpay.Client:
        if not self.key_id or not self._key_secret:
            raise PaymentGatewayError("gateway keys are not configured", "setup")
        if self._client is None:
            self._client = razorpay.Client(auth=(self.key_id, self._key_secret))
        return self._client

    async def _call(self, operation: str, fn, *args) -> dict[str, Any]:
        try:
            return await asyncio.to_thread(fn, *args)
        except Exception as e:
            logger.error(f"Razorpay {operation} failed: {e}")
            raise PaymentGatewayError(str(e), operation)

    async def create_order(
        self, amount_minor: int, currency: str, receipt: str, notes: dict[str, str],
    ) -> dict[str, Any]:
        return await self._call(
            "order creation", self.client.order.create,
            {
                "amount": amount_minor,
                "currency": currency,
                "receipt": receipt,
                "payment_capture": 1,
                "notes": notes,
            },
        )

    async def verify_signature(
        self, gateway_order_id: str, gateway_payment_id: str, signature: str,
    ) -> bool:
        client = self.client
        params = {
            "razorpay_order_id": gateway_order_id,
            "razorpay_payment_id": gateway_payment_id,
            "razorpay_signature": signature,
        }
        try:
            await asyncio.to_thread(client.utility.verify_payment_signature, params)
        except SignatureVerificationError:
            logger.warning(
                "Payment signature mismatch",
                extra={"payment_id": gateway_payment_id},
            )
            return False
        return True

    async def fetch_payment(self, gateway_payment_id: str) -> dict[str, Any]:
        return await self._call(
            "payment fetch", self.client.payment.fetch, gateway_payment_id,
        )

    async def refund(
        self, gateway_payment_id: str, amount_minor: int,
    ) -> dict[str, Any]:
        return await self._call(
            "refund", self.client.payment.refund,
            gateway_payment_id, {"amount": amount_minor},
        )
