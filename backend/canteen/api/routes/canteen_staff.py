"""Canteen Staff Routes — staff accounts, one per canteen.

Invariants:
    - Login token carries the staff member's canteen_id
    - Registration, edits, listing and deletion are admin-only
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import require_admin, require_canteen_staff
from canteen.core.domain_types import PrincipalRole
from canteen.infrastructure.database import get_db
from canteen.infrastructure.security import create_access_token
from canteen.models import Admin, CanteenStaff
from canteen.schemas.accounts import (
    LoginRequest, StaffLoginResponse, StaffProfileUpdate, StaffRegister,
    StaffResponse, StaffResult, StaffUpdate,
)
from canteen.schemas.common import MessageResponse
from canteen.services import accounts
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/canteen-staff", tags=["canteen-staff"])


@router.post("/login", response_model=StaffLoginResponse)
async def login_staff(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    staff = await accounts.authenticate_staff(db, body.email, body.password)
    token = create_access_token(
        str(staff.id), PrincipalRole.CANTEEN_STAFF.value,
        {"canteen_id": str(staff.canteen_id)},
    )
    return StaffLoginResponse(token=token, staff=StaffResponse.model_validate(staff))


@router.post(
    "/register", response_model=StaffResult,
    status_code=status.HTTP_201_CREATED,
)
async def register_staff(
    body: StaffRegister,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    staff = await accounts.register_staff(db, body)
    return StaffResult(
        message="Canteen staff registered successfully",
        staff=StaffResponse.model_validate(staff),
    )


@router.get("/", response_model=list[StaffResponse])
async def list_staff(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    rows = (
        await db.execute(select(CanteenStaff).order_by(CanteenStaff.name))
    ).scalars().all()
    return [StaffResponse.model_validate(s) for s in rows]


@router.get("/profile", response_model=StaffResponse)
async def get_staff_profile(staff: CanteenStaff = Depends(require_canteen_staff)):
    return StaffResponse.model_validate(staff)


@router.put("/profile", response_model=StaffResult)
async def update_staff_profile(
    body: StaffProfileUpdate,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    staff = await accounts.update_staff_profile(db, staff, body)
    return StaffResult(
        message="Canteen staff profile updated successfully",
        staff=StaffResponse.model_validate(staff),
    )


@router.put("/{staff_id}", response_model=StaffResult)
async def update_staff(
    staff_id: UUID,
    body: StaffUpdate,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    staff = await get_or_404(db, CanteenStaff, staff_id, "Canteen staff")
    staff = await accounts.update_staff(db, staff, body)
    return StaffResult(
        message="Canteen staff updated successfully",
        staff=StaffResponse.model_validate(staff),
    )


@router.delete("/{staff_id}", response_model=MessageResponse)
async def delete_staff(
    staff_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    staff = await get_or_404(db, CanteenStaff, staff_id, "Canteen staff")
    await db.delete(staff)
    await db.commit()
    return MessageResponse(message="Canteen staff deleted successfully")
