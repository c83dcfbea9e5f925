"""Order Rules — cancellation, refund and feedback eligibility.

Invariants:
    - Customers (and admins on their behalf) may cancel only pending/preparing orders
    - Staff status updates that cancel an online-paid order are allowed only while pending
    - Online-paid means: payment completed AND method in ONLINE_PAYMENT_METHODS
    - Feedback is accepted only for delivered/completed orders
    - Functions return values or raise BusinessRuleError; they never mutate inputs
"""

from collections.abc import Iterable

from canteen.core.domain_types import OrderStatus, PaymentMethod, PaymentStatus
from canteen.core.errors import BusinessRuleError

ONLINE_PAYMENT_METHODS = frozenset({
    PaymentMethod.RAZORPAY.value, PaymentMethod.CARD.value, PaymentMethod.UPI.value,
})
CANCELLABLE_STATUSES = frozenset({
    OrderStatus.PENDING.value, OrderStatus.PREPARING.value,
})
FEEDBACK_ELIGIBLE_STATUSES = frozenset({
    OrderStatus.DELIVERED.value, OrderStatus.COMPLETED.value,
})
# Priority queue shows everything still in the kitchen
PRIORITY_QUEUE_EXCLUDED = frozenset({
    OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value,
})


def is_online_paid(payment_status: str | None, payment_method: str | None) -> bool:
    return (
        payment_status == PaymentStatus.COMPLETED.value
        and payment_method in ONLINE_PAYMENT_METHODS
    )


def check_cancellable(current_status: str) -> None:
    """Customer/admin cancellation guard."""
    if current_status == OrderStatus.CANCELLED.value:
        raise BusinessRuleError(
            "Order is already cancelled", "ORDER_ALREADY_CANCELLED",
        )
    if current_status not in CANCELLABLE_STATUSES:
        raise BusinessRuleError(
            "Order cannot be cancelled", "ORDER_NOT_CANCELLABLE",
            {"reason": "Orders can only be cancelled when in pending or preparing status"},
        )


def check_status_update(
    current_status: str, new_status: str, online_paid: bool,
) -> None:
    """Staff/admin status update guard."""
    if (
        new_status == OrderStatus.CANCELLED.value
        and online_paid
        and current_status != OrderStatus.PENDING.value
    ):
        raise BusinessRuleError(
            "Cannot cancel this order", "ORDER_NOT_CANCELLABLE",
            {"reason": "Online paid orders can only be cancelled before preparation begins"},
        )


def check_feedback_allowed(order_status: str) -> None:
    if order_status not in FEEDBACK_ELIGIBLE_STATUSES:
        raise BusinessRuleError(
            "You can only provide feedback for delivered or completed orders",
            "ORDER_NOT_DELIVERED",
        )


def order_subtotal(lines: Iterable[tuple[float, int]]) -> float:
    """Sum of price * quantity, rounded to paise."""
    return round(sum(price * quantity for price, quantity in lines), 2)


def to_minor_units(amount: float) -> int:
    """Rupees -> paise for the payment gateway."""
    return int(round(amount * 100))
