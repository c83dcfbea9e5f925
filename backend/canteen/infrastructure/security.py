"""Credentials — bcrypt password hashing and PyJWT access tokens.

Invariants:
    - Plaintext passwords never stored or logged
    - Tokens are HS256 with {sub, role, exp}; staff tokens add canteen_id,
      user tokens add user_role
    - decode_access_token raises AuthenticationError for any invalid token
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from canteen.config import get_settings
from canteen.core.errors import AuthenticationError


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    subject: str, role: str, extra_claims: dict[str, Any] | None = None,
) -> str:
    """Sign a bearer token for an admin, user or staff account."""
    settings = get_settings()
    payload = {
        "sub": subject,
        "role": role,
        "exp": datetime.now(timezone.utc)
        + timedelta(minutes=settings.jwt_expires_minutes),
    }
    payload.update(extra_claims or {})
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        claims = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Not authorized, token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Not authorized, token failed")
    if "sub" not in claims or "role" not in claims:
        raise AuthenticationError("Not authorized, token failed")
    return claims
