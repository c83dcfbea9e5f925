"""CanteenStaff ORM — one staff login per canteen.

Invariants:
    - email unique
    - at most one staff account per canteen (checked by the accounts service)
"""

import uuid

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin


class CanteenStaff(TimestampMixin, Base):
    __tablename__ = "canteen_staff"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    canteen_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("canteens.id", ondelete="CASCADE"),
        nullable=False,
    )
    contact_number: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    member_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    canteen: Mapped["Canteen"] = relationship("Canteen", lazy="selectin")
