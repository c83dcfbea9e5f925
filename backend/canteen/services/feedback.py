"""Feedback Service — submission rules and canteen rating recomputation.

Invariants:
    - Only the order's owner may rate it, once, after delivery
    - Canteen aggregates are recomputed from all of its feedback after each save
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.errors import (
    DuplicateResourceError, PermissionDeniedError, ResourceNotFoundError,
)
from canteen.core.order_rules import FEEDBACK_ELIGIBLE_STATUSES, check_feedback_allowed
from canteen.core.ratings import canteen_rating_summary
from canteen.models import Canteen, Feedback, Order, User
from canteen.schemas.feedback import FeedbackCreate

logger = logging.getLogger(__name__)


async def feedback_exists(db: AsyncSession, order_id: UUID, email: str) -> bool:
    stmt = select(func.count()).select_from(Feedback).where(
        Feedback.order_id == order_id, Feedback.email == email,
    )
    return (await db.execute(stmt)).scalar_one() > 0


async def recompute_canteen_ratings(db: AsyncSession, canteen_id: UUID) -> None:
    canteen = await db.get(Canteen, canteen_id)
    if canteen is None:
        return
    rows = (
        await db.execute(select(Feedback).where(Feedback.canteen_id == canteen_id))
    ).scalars().all()
    for name, value in canteen_rating_summary(rows).items():
        setattr(canteen, name, value)


async def submit_feedback(
    db: AsyncSession, user: User, body: FeedbackCreate,
) -> Feedback:
    order = await db.get(Order, body.order_id)
    if order is None:
        raise ResourceNotFoundError("Order", str(body.order_id))
    if order.email != user.email:
        raise PermissionDeniedError("You can only provide feedback for your own orders")
    check_feedback_allowed(order.status)
    if await feedback_exists(db, order.id, user.email):
        raise DuplicateResourceError("You have already submitted feedback for this order")

    feedback = Feedback(
        order_id=order.id,
        email=user.email,
        canteen_id=order.canteen_id,
        rating=body.rating,
        comment=body.comment,
        food_quality=body.food_quality,
        service_speed=body.service_speed,
        app_experience=body.app_experience,
    )
    db.add(feedback)
    await db.flush()
    await recompute_canteen_ratings(db, order.canteen_id)
    await db.commit()
    await db.refresh(feedback)
    logger.info(
        "Feedback submitted",
        extra={"order_id": str(order.id), "canteen_id": str(order.canteen_id)},
    )
    return feedback


async def can_submit_for_canteen(db: AsyncSession, user: User, canteen_id: UUID) -> bool:
    stmt = select(func.count()).select_from(Order).where(
        Order.email == user.email,
        Order.canteen_id == canteen_id,
        Order.status.in_(FEEDBACK_ELIGIBLE_STATUSES),
    )
    return (await db.execute(stmt)).scalar_one() > 0
