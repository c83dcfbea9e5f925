"""ExamDetails ORM — scheduled exams that justify priority orders.

Invariants:
    - start/end_university_id bound the eligible student ID range (inclusive)
    - only is_active exams are listed to users
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from canteen.db.base import Base, TimestampMixin


class ExamDetails(TimestampMixin, Base):
    __tablename__ = "exam_details"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    exam_code: Mapped[str] = mapped_column(
        String(36), nullable=False, unique=True,
        default=lambda: str(uuid.uuid4()),
    )
    exam_name: Mapped[str] = mapped_column(String(200), nullable=False)
    exam_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    exam_time: Mapped[str] = mapped_column(String(20), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    semester: Mapped[str] = mapped_column(String(10), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_university_id: Mapped[str] = mapped_column(String(30), nullable=False)
    end_university_id: Mapped[str] = mapped_column(String(30), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
