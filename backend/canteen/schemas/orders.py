"""Order Schemas — placement, status changes and order views.

Invariants:
    - OrderCreate needs at least one item, each with quantity >= 1
    - priority=True requires priority_reason and priority_details
    - Clients never send prices or totals; the server computes them
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from canteen.core.domain_types import OrderStatus, PriorityReason
from canteen.schemas.common import CamelModel, CanteenSummary, UserSummary


class OrderItemIn(CamelModel):
    item_id: UUID
    quantity: int = Field(ge=1)


class OrderCreate(CamelModel):
    canteen_id: UUID
    items: list[OrderItemIn] = Field(min_length=1)
    order_date: str | None = Field(None, max_length=20)
    order_time: str | None = Field(None, max_length=20)
    delivery_address: str | None = None
    priority: bool = False
    priority_reason: PriorityReason | None = None
    priority_details: str | None = None
    exam_id: UUID | None = None
    pickup_time: str | None = Field(None, max_length=20)
    special_instructions: str | None = None

    @model_validator(mode="after")
    def check_priority_fields(self):
        if self.priority:
            if self.priority_reason is None:
                raise ValueError("priorityReason is required for priority orders")
            if not (self.priority_details or "").strip():
                raise ValueError("priorityDetails is required for priority orders")
        return self


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class OrderItemResponse(CamelModel):
    item_id: UUID = Field(validation_alias="menu_item_id")
    item_name: str
    quantity: int
    price: float


class OrderResponse(CamelModel):
    id: UUID
    order_code: str
    email: str
    order_date: str
    order_time: str
    status: str
    total_amount: float
    canteen_id: UUID
    exam_id: UUID | None = None
    priority: bool
    priority_reason: str | None = None
    priority_details: str | None = None
    pickup_time: str | None = None
    special_instructions: str | None = None
    delivery_address: str
    priority_fee: int = 0
    items: list[OrderItemResponse] = []
    created_at: datetime | None = None
    canteen: CanteenSummary | None = None
    user: UserSummary | None = None


class OrderPlacedResponse(CamelModel):
    message: str
    order: OrderResponse


class OrderUpdateResponse(CamelModel):
    """Result of a status change or cancellation, with refund outcome."""
    message: str
    order: OrderResponse
    refunded: bool = False
    refund_error: str | None = None
