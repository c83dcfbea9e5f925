"""Feedback Routes — customer ratings, staff responses, admin statistics.

Invariants:
    - Testimonials are public; everything else needs a token
    - Staff see and answer feedback for their own canteen only
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import require_admin, require_canteen_staff, require_user
from canteen.core.errors import PermissionDeniedError
from canteen.core.ratings import feedback_report, overall_feedback_stats
from canteen.infrastructure.database import get_db
from canteen.models import Admin, Canteen, CanteenStaff, Feedback, User
from canteen.schemas.feedback import (
    AllFeedbackView, CanteenFeedbackStat, CanteenFeedbackView, FeedbackCreate,
    FeedbackRespond, FeedbackResponse, FeedbackResult,
)
from canteen.services import feedback as feedback_service
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/feedback", tags=["feedback"])

TESTIMONIAL_MIN_RATING = 4
TESTIMONIAL_LIMIT = 3


@router.get("/testimonials", response_model=list[FeedbackResponse])
async def list_testimonials(db: AsyncSession = Depends(get_db)):
    rows = (
        await db.execute(
            select(Feedback)
            .where(
                Feedback.rating >= TESTIMONIAL_MIN_RATING,
                Feedback.comment.is_not(None),
                func.trim(Feedback.comment) != "",
            )
            .order_by(Feedback.created_at.desc())
            .limit(TESTIMONIAL_LIMIT),
        )
    ).scalars().all()
    return [FeedbackResponse.model_validate(f) for f in rows]


@router.post(
    "/", response_model=FeedbackResult, status_code=status.HTTP_201_CREATED,
)
async def submit_feedback(
    body: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    feedback = await feedback_service.submit_feedback(db, user, body)
    return FeedbackResult(
        message="Feedback submitted successfully",
        feedback=FeedbackResponse.model_validate(feedback),
    )


@router.get("/user", response_model=list[FeedbackResponse])
async def list_user_feedback(
    db: AsyncSession = Depends(get_db), user: User = Depends(require_user),
):
    rows = (
        await db.execute(
            select(Feedback)
            .where(Feedback.email == user.email)
            .order_by(Feedback.created_at.desc()),
        )
    ).scalars().all()
    return [FeedbackResponse.model_validate(f) for f in rows]


@router.get("/order/{order_id}/exists")
async def feedback_exists(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    return {"exists": await feedback_service.feedback_exists(db, order_id, user.email)}


@router.get("/canteen/{canteen_id}/can-submit")
async def can_submit_feedback(
    canteen_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    return {
        "canSubmit": await feedback_service.can_submit_for_canteen(db, user, canteen_id),
    }


@router.get("/canteen/{canteen_id}", response_model=CanteenFeedbackView)
async def list_canteen_feedback(
    canteen_id: UUID,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    if staff.canteen_id != canteen_id:
        raise PermissionDeniedError("You can only view feedback for your own canteen")
    rows = (
        await db.execute(
            select(Feedback)
            .where(Feedback.canteen_id == canteen_id)
            .order_by(Feedback.created_at.desc()),
        )
    ).scalars().all()
    return CanteenFeedbackView(
        feedback=[FeedbackResponse.model_validate(f) for f in rows],
        stats=feedback_report(rows),
        count=len(rows),
    )


@router.put("/{feedback_id}/respond", response_model=FeedbackResult)
async def respond_to_feedback(
    feedback_id: UUID,
    body: FeedbackRespond,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    feedback = await get_or_404(db, Feedback, feedback_id, "Feedback")
    if feedback.canteen_id != staff.canteen_id:
        raise PermissionDeniedError("You can only respond to feedback for your own canteen")
    feedback.staff_response = body.response
    feedback.is_resolved = True
    await db.commit()
    await db.refresh(feedback)
    return FeedbackResult(
        message="Response added successfully",
        feedback=FeedbackResponse.model_validate(feedback),
    )


@router.get("/stats", response_model=list[CanteenFeedbackStat])
async def feedback_stats(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    """Per-canteen average rating and feedback count."""
    rows = (
        await db.execute(
            select(
                Canteen.id, Canteen.name, Canteen.location,
                func.avg(Feedback.rating), func.count(Feedback.id),
            )
            .outerjoin(Feedback, Feedback.canteen_id == Canteen.id)
            .group_by(Canteen.id, Canteen.name, Canteen.location)
            .order_by(Canteen.name),
        )
    ).all()
    return [
        CanteenFeedbackStat(
            canteen_id=cid, canteen_name=name, location=location,
            average_rating=round(float(avg), 1) if avg is not None else 0.0,
            total_feedback=count,
        )
        for cid, name, location, avg, count in rows
    ]


@router.get("/", response_model=AllFeedbackView)
async def list_all_feedback(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    rows = (
        await db.execute(select(Feedback).order_by(Feedback.created_at.desc()))
    ).scalars().all()
    return AllFeedbackView(
        feedback=[FeedbackResponse.model_validate(f) for f in rows],
        stats=overall_feedback_stats(rows),
    )
