"""Exam Routes — exam schedule used to validate exam-priority orders.

Invariants:
    - Listings are sorted by exam date ascending
    - Public listings show active exams only, from the start of today
    - Create/update require both ends of the university ID range
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import Principal, get_current_principal, require_admin, require_user
from canteen.core.errors import RequestValidationFailed
from canteen.core.exam_schedule import next_24_hours_window, start_of_day
from canteen.db.base import utcnow
from canteen.infrastructure.database import get_db
from canteen.models import Admin, ExamDetails, User
from canteen.schemas.common import MessageResponse
from canteen.schemas.exams import ExamCreate, ExamResponse, ExamUpdate
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/exams", tags=["exams"])


def _require_id_range(body: ExamCreate) -> None:
    errors = {
        field: message for field, value, message in (
            ("startUniversityId", body.start_university_id, "Start University ID is required"),
            ("endUniversityId", body.end_university_id, "End University ID is required"),
        ) if not value
    }
    if errors:
        raise RequestValidationFailed(
            "Validation error", field=next(iter(errors)), details={"errors": errors},
        )


async def _list(db: AsyncSession, *conditions) -> list[ExamResponse]:
    rows = (
        await db.execute(
            select(ExamDetails).where(*conditions).order_by(ExamDetails.exam_date),
        )
    ).scalars().all()
    return [ExamResponse.model_validate(e) for e in rows]


@router.get("/", response_model=list[ExamResponse])
async def list_exams(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    return await _list(db)


@router.get("/active", response_model=list[ExamResponse])
async def list_active_exams(db: AsyncSession = Depends(get_db)):
    return await _list(
        db,
        ExamDetails.is_active.is_(True),
        ExamDetails.exam_date >= start_of_day(utcnow()),
    )


@router.get("/upcoming", response_model=list[ExamResponse])
async def list_upcoming_exams(db: AsyncSession = Depends(get_db)):
    return await list_active_exams(db)


@router.get("/next24hours", response_model=list[ExamResponse])
async def list_exams_next_24_hours(db: AsyncSession = Depends(get_db)):
    start, end = next_24_hours_window(utcnow())
    return await _list(
        db,
        ExamDetails.is_active.is_(True),
        ExamDetails.exam_date >= start,
        ExamDetails.exam_date <= end,
    )


@router.get("/user", response_model=list[ExamResponse])
async def list_user_exams(
    db: AsyncSession = Depends(get_db), user: User = Depends(require_user),
):
    """Active exams for the caller's department and semester."""
    return await _list(
        db,
        ExamDetails.is_active.is_(True),
        ExamDetails.department == user.department,
        ExamDetails.semester == user.semester,
    )


@router.get(
    "/department/{department}/semester/{semester}",
    response_model=list[ExamResponse],
)
async def list_exams_by_department(
    department: str,
    semester: str,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    return await _list(
        db,
        ExamDetails.is_active.is_(True),
        ExamDetails.department == department,
        ExamDetails.semester == semester,
    )


@router.get("/{exam_id}", response_model=ExamResponse)
async def get_exam(
    exam_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    return ExamResponse.model_validate(
        await get_or_404(db, ExamDetails, exam_id, "Exam detail"),
    )


@router.post(
    "/", response_model=ExamResponse, status_code=status.HTTP_201_CREATED,
)
async def create_exam(
    body: ExamCreate,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    _require_id_range(body)
    exam = ExamDetails(**body.model_dump())
    db.add(exam)
    await db.commit()
    await db.refresh(exam)
    logger.info(f"Exam detail created: {exam.exam_name}")
    return ExamResponse.model_validate(exam)


@router.put("/{exam_id}", response_model=ExamResponse)
async def update_exam(
    exam_id: UUID,
    body: ExamUpdate,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    _require_id_range(body)
    exam = await get_or_404(db, ExamDetails, exam_id, "Exam detail")
    for name, value in body.model_dump().items():
        setattr(exam, name, value)
    await db.commit()
    await db.refresh(exam)
    return ExamResponse.model_validate(exam)


@router.delete("/{exam_id}", response_model=MessageResponse)
async def delete_exam(
    exam_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    exam = await get_or_404(db, ExamDetails, exam_id, "Exam detail")
    await db.delete(exam)
    await db.commit()
    return MessageResponse(message="Exam detail deleted successfully")
