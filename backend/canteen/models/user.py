"""User ORM — students and faculty who place orders.

Invariants:
    - email and uni_id are unique
    - role is "student" or "faculty" (UserRole)
    - semester required for students; privilege_reason required when is_privileged

Design Decisions:
    - Dependent rows (cart, orders, feedback) are removed by the accounts
      service in one transaction, not by ORM cascades: orders and feedback
      reference the user by email, like the payment records do
"""

import uuid

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin
from canteen.core.domain_types import UserRole


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    uni_id: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    phone_no: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.STUDENT.value,
    )
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    semester: Mapped[str | None] = mapped_column(String(10), nullable=True)
    is_privileged: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    privilege_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)
