"""Credential tests — bcrypt hashing and JWT round trips.

Tests cover:
    - hash_password / verify_password, malformed hashes
    - create_access_token claims, expiry and tampering
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from canteen.config import get_settings
from canteen.core.errors import AuthenticationError
from canteen.infrastructure.security import (
    create_access_token, decode_access_token, hash_password, verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_verify_malformed_hash():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_token_claims():
    token = create_access_token("abc", "canteen_staff", {"canteen_id": "c1"})
    claims = decode_access_token(token)
    assert claims["sub"] == "abc"
    assert claims["role"] == "canteen_staff"
    assert claims["canteen_id"] == "c1"


def test_expired_token():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "abc", "role": "user", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthenticationError, match="token expired"):
        decode_access_token(token)


def test_wrong_secret():
    token = jwt.encode(
        {"sub": "abc", "role": "user"}, "another-secret-that-is-long-enough-123", algorithm="HS256",
    )
    with pytest.raises(AuthenticationError, match="token failed"):
        decode_access_token(token)


def test_missing_role_claim():
    settings = get_settings()
    token = jwt.encode({"sub": "abc"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(AuthenticationError):
        decode_access_token(token)
