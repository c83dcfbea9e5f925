"""Auth & Injectable Dependencies — bearer-token principals and external gateways.

Invariants:
    - Missing/invalid/expired token -> AuthenticationError (401)
    - Token for a deleted account -> AuthenticationError (401)
    - Wrong role for the endpoint -> PermissionDeniedError (403)
    - require_user / require_canteen_staff / require_admin return the ORM row

Design Decisions:
    - Gateway and image storage resolved through Depends so tests can swap
      them with app.dependency_overrides
"""

from dataclasses import dataclass
from functools import lru_cache
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.config import get_settings
from canteen.core.domain_types import PrincipalRole
from canteen.core.errors import AuthenticationError, PermissionDeniedError
from canteen.infrastructure.database import get_db
from canteen.infrastructure.image_storage import CloudinaryImageStorage, ImageStorage
from canteen.infrastructure.payment_gateway import PaymentGateway, RazorpayGateway
from canteen.infrastructure.security import decode_access_token
from canteen.models import Admin, CanteenStaff, User

_bearer = HTTPBearer(auto_error=False)

_ACCOUNT_MODELS = {
    PrincipalRole.ADMIN: Admin,
    PrincipalRole.USER: User,
    PrincipalRole.CANTEEN_STAFF: CanteenStaff,
}


@dataclass(frozen=True)
class Principal:
    """Authenticated caller: role from the token, account re-loaded from the DB."""
    role: PrincipalRole
    account: Admin | User | CanteenStaff

    @property
    def is_admin(self) -> bool:
        return self.role == PrincipalRole.ADMIN


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")
    claims = decode_access_token(credentials.credentials)
    try:
        role = PrincipalRole(claims["role"])
    except ValueError:
        raise AuthenticationError("Not authorized, token failed")

    try:
        account_id = UUID(str(claims["sub"]))
    except ValueError:
        raise AuthenticationError("Not authorized, token failed")

    account = await db.get(_ACCOUNT_MODELS[role], account_id)
    if account is None:
        raise AuthenticationError("Not authorized, account not found")
    return Principal(role=role, account=account)


def _require(*roles: PrincipalRole, message: str):
    async def dependency(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if principal.role not in roles:
            raise PermissionDeniedError(message)
        return principal
    return dependency


_admin_only = _require(PrincipalRole.ADMIN, message="Not authorized as an admin")
_user_only = _require(PrincipalRole.USER, message="Not authorized as a user")
_staff_only = _require(
    PrincipalRole.CANTEEN_STAFF, message="Not authorized as canteen staff",
)

require_admin_or_staff = _require(
    PrincipalRole.ADMIN, PrincipalRole.CANTEEN_STAFF,
    message="Not authorized as admin or canteen staff",
)


async def require_admin(principal: Principal = Depends(_admin_only)) -> Admin:
    return principal.account


async def require_user(principal: Principal = Depends(_user_only)) -> User:
    return principal.account


async def require_canteen_staff(
    principal: Principal = Depends(_staff_only),
) -> CanteenStaff:
    return principal.account


# ─── External services ──────────────────────────────────────────

@lru_cache
def _razorpay_gateway() -> RazorpayGateway:
    settings = get_settings()
    return RazorpayGateway(settings.razorpay_key_id, settings.razorpay_key_secret)


@lru_cache
def _cloudinary_storage() -> CloudinaryImageStorage:
    settings = get_settings()
    return CloudinaryImageStorage(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
        settings.cloudinary_root_folder,
        settings.max_image_bytes,
    )


def get_payment_gateway() -> PaymentGateway:
    return _razorpay_gateway()


def get_image_storage() -> ImageStorage:
    return _cloudinary_storage()
