"""Feedback ORM — one rating/comment per (order, user).

Invariants:
    - rating in [1, 5]; sub-ratings in [1, 5] or NULL
    - (order_id, email) unique
    - is_resolved set when staff respond

Design Decisions:
    - canteen_id has no foreign key, like orders.canteen_id: feedback can
      still be left for a completed order after its canteen is deleted
"""

import uuid

from sqlalchemy import (
    String, Text, Boolean, Integer, ForeignKey, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin


class Feedback(TimestampMixin, Base):
    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("order_id", "email", name="uq_feedback_order_email"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    canteen_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    food_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    service_speed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    app_experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    staff_response: Mapped[str | None] = mapped_column(Text, nullable=True)

    canteen: Mapped["Canteen"] = relationship(
        "Canteen",
        primaryjoin="foreign(Feedback.canteen_id) == Canteen.id",
        viewonly=True, lazy="selectin",
    )
