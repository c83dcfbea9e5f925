"""Feedback Schemas — ratings, staff responses and aggregate views.

Invariants:
    - rating 1-5 required; sub-ratings 1-5 optional
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from canteen.schemas.common import CamelModel, CanteenSummary


class FeedbackCreate(CamelModel):
    order_id: UUID
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)
    food_quality: int | None = Field(None, ge=1, le=5)
    service_speed: int | None = Field(None, ge=1, le=5)
    app_experience: int | None = Field(None, ge=1, le=5)


class FeedbackRespond(CamelModel):
    response: str = Field(min_length=1, max_length=2000)


class FeedbackResponse(CamelModel):
    id: UUID
    order_id: UUID
    email: str
    canteen_id: UUID
    rating: int
    comment: str | None = None
    food_quality: int | None = None
    service_speed: int | None = None
    app_experience: int | None = None
    is_resolved: bool = False
    staff_response: str | None = None
    created_at: datetime | None = None
    canteen: CanteenSummary | None = None


class FeedbackResult(CamelModel):
    message: str
    feedback: FeedbackResponse


class CanteenFeedbackView(CamelModel):
    """Staff dashboard: feedback list plus averages."""
    feedback: list[FeedbackResponse]
    stats: dict[str, float | int]
    count: int


class CanteenFeedbackStat(CamelModel):
    canteen_id: UUID
    canteen_name: str
    location: str
    average_rating: float
    total_feedback: int


class AllFeedbackView(CamelModel):
    feedback: list[FeedbackResponse]
    stats: dict[str, float | int]
