"""Account Schemas — admins, users and canteen staff.

Invariants:
    - password_hash never appears in a response model
    - UserRegister: semester required for students, privilege_reason for privileged users
    - Profile updates are partial; a provided uni_id must not be blank
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from canteen.core.domain_types import UserRole
from canteen.schemas.common import CamelModel, CanteenSummary, Email, Password


class LoginRequest(CamelModel):
    email: Email
    password: str = Field(min_length=1)


# --- Admin -------------------------------------------------------------------

class AdminRegister(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: Email
    password: Password


class AdminProfileUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: Email | None = None
    password: Password | None = None


class AdminResponse(CamelModel):
    id: UUID
    name: str
    email: str


class AdminResult(CamelModel):
    message: str
    admin: AdminResponse


class AdminLoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    admin: AdminResponse


# --- Users -------------------------------------------------------------------

class UserRegister(CamelModel):
    """Self-registration for students and faculty."""
    name: str = Field(min_length=1, max_length=100)
    email: Email
    uni_id: str = Field(min_length=1, max_length=30)
    phone_no: str = Field(min_length=5, max_length=20)
    password: Password
    role: UserRole = UserRole.STUDENT
    department: str = Field(min_length=1, max_length=100)
    semester: str | None = Field(None, max_length=10)
    is_privileged: bool = False
    privilege_reason: str | None = Field(None, max_length=255)

    @field_validator("uni_id", "name", "department")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v

    @model_validator(mode="after")
    def check_role_fields(self):
        if self.role == UserRole.STUDENT and not self.semester:
            raise ValueError("semester is required for students")
        if self.is_privileged and not self.privilege_reason:
            raise ValueError("privilegeReason is required for privileged users")
        return self


class UserProfileUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: Email | None = None
    uni_id: str | None = Field(None, max_length=30)
    phone_no: str | None = Field(None, min_length=5, max_length=20)
    department: str | None = Field(None, min_length=1, max_length=100)
    semester: str | None = Field(None, max_length=10)
    password: Password | None = None

    @field_validator("uni_id")
    @classmethod
    def uni_id_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("University ID cannot be empty")
        return v


class PasswordReset(CamelModel):
    email: Email
    new_password: Password


class UserResponse(CamelModel):
    id: UUID
    name: str
    email: str
    uni_id: str
    phone_no: str
    role: str
    department: str
    semester: str | None = None
    is_privileged: bool = False
    privilege_reason: str | None = None
    created_at: datetime | None = None


class UserResult(CamelModel):
    message: str
    user: UserResponse


class UserDeletionResult(CamelModel):
    message: str
    deleted: dict[str, int]


class UserLoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    user: UserResponse


# --- Canteen staff -----------------------------------------------------------

class StaffRegister(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: Email
    canteen_id: UUID
    contact_number: str = Field(min_length=5, max_length=20)
    password: Password
    member_id: str | None = Field(None, max_length=50)


class StaffUpdate(CamelModel):
    """Admin edit of a staff account; every field optional."""
    name: str | None = Field(None, min_length=1, max_length=100)
    email: Email | None = None
    canteen_id: UUID | None = None
    contact_number: str | None = Field(None, min_length=5, max_length=20)
    password: Password | None = None
    member_id: str | None = Field(None, max_length=50)


class StaffProfileUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: Email | None = None
    contact_number: str | None = Field(None, min_length=5, max_length=20)
    password: Password | None = None


class StaffResponse(CamelModel):
    id: UUID
    name: str
    email: str
    canteen_id: UUID
    contact_number: str
    member_id: str | None = None
    canteen: CanteenSummary | None = None


class StaffResult(CamelModel):
    message: str
    staff: StaffResponse


class StaffLoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    staff: StaffResponse
