"""Canteen ORM — a physical food outlet and its aggregate ratings.

Invariants:
    - average_rating and sub-ratings are in [0, 5], recomputed after each feedback
    - total_ratings counts feedback rows for this canteen
    - image_public_id identifies the hosted image for deletion

Design Decisions:
    - Ratings denormalized onto the row: listing canteens needs no aggregate query
    - Menu items and staff are deleted explicitly by the catalog service so
      their hosted images can be removed first
"""

import uuid

from sqlalchemy import String, Text, Boolean, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin


class Canteen(TimestampMixin, Base):
    __tablename__ = "canteens"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    availability: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    opening_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    closing_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    food_quality: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    service_speed: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    app_experience: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
