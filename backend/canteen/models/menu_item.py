"""MenuItem ORM — a dish offered by one canteen.

Invariants:
    - item_code is a generated UUID string, unique
    - price >= 0
    - canteen_id references an existing canteen
"""

import uuid

from sqlalchemy import String, Text, Boolean, Float, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin


class MenuItem(TimestampMixin, Base):
    __tablename__ = "menu_items"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    item_code: Mapped[str] = mapped_column(
        String(36), nullable=False, unique=True,
        default=lambda: str(uuid.uuid4()),
    )
    item_name: Mapped[str] = mapped_column(String(100), nullable=False)
    canteen_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("canteens.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    availability: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    preparation_time: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    canteen: Mapped["Canteen"] = relationship("Canteen", lazy="selectin")
