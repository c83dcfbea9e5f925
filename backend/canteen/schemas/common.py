"""Shared schema pieces — camelCase wire format and reusable field types.

Invariants:
    - JSON uses camelCase keys; Python code uses snake_case attributes
    - Emails are stripped and lower-cased before any lookup
    - Passwords fit in 72 UTF-8 bytes, the most bcrypt will hash
"""

from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _normalize_email(v: str) -> str:
    return v.strip().lower()


# bcrypt only accepts secrets up to 72 bytes
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


Email = Annotated[
    str,
    Field(pattern=r"^\s*[^@\s]+@[^@\s]+\.[^@\s]+\s*$", max_length=255),
    AfterValidator(_normalize_email),
]
Password = Annotated[
    str, Field(min_length=6, max_length=PASSWORD_MAX_BYTES),
    AfterValidator(_check_password_bytes),
]


class CamelModel(BaseModel):
    """Base for request/response models exchanged with the web clients."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class CanteenSummary(CamelModel):
    id: UUID
    name: str
    location: str


class UserSummary(CamelModel):
    name: str
    email: str


class MessageResponse(CamelModel):
    message: str


class AvailabilityUpdate(CamelModel):
    availability: bool
