"""Shared constants and request helpers for route tests."""

import bcrypt

PASSWORD = "secret123"
# Low cost factor keeps seeding fast
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
