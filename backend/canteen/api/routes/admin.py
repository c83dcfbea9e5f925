"""Admin Routes — admin login, registration and profile.

Invariants:
    - Only an authenticated admin may register another admin
    - The configured default admin is created on its first login
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import require_admin
from canteen.core.domain_types import PrincipalRole
from canteen.infrastructure.database import get_db
from canteen.infrastructure.security import create_access_token
from canteen.models import Admin
from canteen.schemas.accounts import (
    AdminLoginResponse, AdminProfileUpdate, AdminRegister, AdminResponse,
    AdminResult, LoginRequest,
)
from canteen.services import accounts

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login", response_model=AdminLoginResponse)
async def login_admin(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    admin = await accounts.authenticate_admin(db, body.email, body.password)
    token = create_access_token(str(admin.id), PrincipalRole.ADMIN.value)
    return AdminLoginResponse(token=token, admin=AdminResponse.model_validate(admin))


@router.post(
    "/register", response_model=AdminResult,
    status_code=status.HTTP_201_CREATED,
)
async def register_admin(
    body: AdminRegister,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    admin = await accounts.register_admin(db, body)
    return AdminResult(
        message="Admin registered successfully",
        admin=AdminResponse.model_validate(admin),
    )


@router.get("/profile", response_model=AdminResponse)
async def get_admin_profile(admin: Admin = Depends(require_admin)):
    return AdminResponse.model_validate(admin)


@router.put("/profile", response_model=AdminResult)
async def update_admin_profile(
    body: AdminProfileUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    admin = await accounts.update_admin(db, admin, body)
    return AdminResult(
        message="Admin profile updated successfully",
        admin=AdminResponse.model_validate(admin),
    )
