"""User Routes — student/faculty accounts.

Invariants:
    - Registration and login are public; profile routes need a user token
    - Listing and deleting users is admin-only
    - Password hashes never leave the server
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import require_admin, require_user
from canteen.core.domain_types import PrincipalRole
from canteen.infrastructure.database import get_db
from canteen.infrastructure.security import create_access_token
from canteen.models import Admin, User
from canteen.schemas.accounts import (
    LoginRequest, PasswordReset, UserDeletionResult, UserLoginResponse,
    UserProfileUpdate, UserRegister, UserResponse, UserResult,
)
from canteen.schemas.common import MessageResponse
from canteen.services import accounts

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "/register", response_model=UserResult,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(body: UserRegister, db: AsyncSession = Depends(get_db)):
    user = await accounts.register_user(db, body)
    return UserResult(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=UserLoginResponse)
async def login_user(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await accounts.authenticate_user(db, body.email, body.password)
    token = create_access_token(
        str(user.id), PrincipalRole.USER.value, {"user_role": user.role},
    )
    return UserLoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: PasswordReset, db: AsyncSession = Depends(get_db)):
    await accounts.reset_password(db, body.email, body.new_password)
    return MessageResponse(
        message="Password reset successful. Please login with your new password.",
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(require_user)):
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserResult)
async def update_profile(
    body: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    user = await accounts.update_user_profile(db, user, body)
    return UserResult(
        message="User profile updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.get("/", response_model=list[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db), _: Admin = Depends(require_admin),
):
    users = (
        await db.execute(select(User).order_by(User.created_at.desc()))
    ).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


@router.delete("/{user_id}", response_model=UserDeletionResult)
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    deleted = await accounts.delete_user(db, user_id)
    return UserDeletionResult(
        message="User and all associated data deleted successfully",
        deleted=deleted,
    )
