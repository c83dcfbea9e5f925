"""Order ORM — placed orders and their line items.

Invariants:
    - status is an OrderStatus value
    - total_amount = sum(item.price * item.quantity) + priority_fee
    - priority_fee is 0 for non-priority orders
    - priority orders carry priority_reason and priority_details
    - the owner is identified by email (matches Payment and Feedback)

Design Decisions:
    - item name and price captured at placement time: later menu edits don't rewrite history
    - order_date/order_time kept as strings, as clients submit and display them
    - canteen_id has no foreign key: order history outlives a deleted canteen
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Boolean, Float, Integer, DateTime, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin, utcnow
from canteen.core.domain_types import OrderStatus


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    order_code: Mapped[str] = mapped_column(
        String(36), nullable=False, unique=True,
        default=lambda: str(uuid.uuid4()),
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    order_date: Mapped[str] = mapped_column(String(20), nullable=False)
    order_time: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.PENDING.value,
    )
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    canteen_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    exam_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("exam_details.id", ondelete="SET NULL"),
        nullable=True,
    )
    priority: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priority_reason: Mapped[str | None] = mapped_column(String(20), nullable=True)
    priority_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    pickup_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    special_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_address: Mapped[str] = mapped_column(Text, nullable=False)
    priority_fee: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    placed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order",
        cascade="all, delete-orphan", lazy="selectin",
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        CheckConstraint("price >= 0", name="ck_order_items_price"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    menu_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    item_name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    order: Mapped["Order"] = relationship("Order", back_populates="items")
