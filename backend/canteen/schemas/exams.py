"""Exam Schemas — schedule entries bounding eligible university IDs."""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import Field, field_validator

from canteen.schemas.common import CamelModel


class ExamCreate(CamelModel):
    exam_name: str = Field(min_length=1, max_length=200)
    exam_date: datetime
    exam_time: str = Field(min_length=1, max_length=20)
    department: str = Field(min_length=1, max_length=100)
    semester: str = Field(min_length=1, max_length=10)
    location: str | None = Field(None, max_length=255)
    description: str | None = None
    start_university_id: str | None = Field(None, max_length=30)
    end_university_id: str | None = Field(None, max_length=30)
    is_active: bool = True

    @field_validator("exam_date")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("start_university_id", "end_university_id")
    @classmethod
    def strip_upper(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else v


class ExamUpdate(ExamCreate):
    pass


class ExamResponse(CamelModel):
    id: UUID
    exam_code: str
    exam_name: str
    exam_date: datetime
    exam_time: str
    department: str
    semester: str
    location: str | None = None
    description: str | None = None
    start_university_id: str
    end_university_id: str
    is_active: bool
