"""Admin route tests — login, default admin bootstrap, registration, profile.

Tests cover:
    - POST /api/admin/login: valid credentials, wrong password, unknown email
    - Default admin created on first login with the configured credentials
    - POST /api/admin/register: admin-only, duplicate email -> 409
    - Bearer token handling: missing, malformed, wrong role
"""

from sqlalchemy import select

from canteen.models import Admin
from tests.api.helpers import PASSWORD, auth


async def test_login_returns_token(client, admin):
    resp = await client.post(
        "/api/admin/login", json={"email": "ROOT@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Login successful"
    assert data["admin"]["email"] == "root@example.com"
    assert "passwordHash" not in data["admin"]

    profile = await client.get("/api/admin/profile", headers=auth(data["token"]))
    assert profile.status_code == 200
    assert profile.json()["name"] == "Root"


async def test_login_wrong_password(client, admin):
    resp = await client.post(
        "/api/admin/login", json={"email": "root@example.com", "password": "nope123"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTHENTICATION_ERROR"


async def test_login_unknown_admin(client):
    resp = await client.post(
        "/api/admin/login", json={"email": "ghost@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 404


async def test_default_admin_created_on_first_login(client, test_session_factory):
    resp = await client.post(
        "/api/admin/login",
        json={"email": "admin@example.com", "password": "adminpassword"},
    )
    assert resp.status_code == 200
    async with test_session_factory() as session:
        rows = (await session.execute(select(Admin))).scalars().all()
    assert [a.email for a in rows] == ["admin@example.com"]


async def test_default_admin_wrong_password_creates_nothing(client, test_session_factory):
    resp = await client.post(
        "/api/admin/login",
        json={"email": "admin@example.com", "password": "guess123"},
    )
    assert resp.status_code == 401
    async with test_session_factory() as session:
        assert (await session.execute(select(Admin))).first() is None


async def test_register_requires_admin(client, student_headers):
    body = {"name": "Second", "email": "second@example.com", "password": "secret123"}
    assert (await client.post("/api/admin/register", json=body)).status_code == 401
    resp = await client.post("/api/admin/register", json=body, headers=student_headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "PERMISSION_DENIED"


async def test_register_and_duplicate(client, admin_headers):
    body = {"name": "Second", "email": "second@example.com", "password": "secret123"}
    resp = await client.post("/api/admin/register", json=body, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["admin"]["email"] == "second@example.com"

    resp = await client.post("/api/admin/register", json=body, headers=admin_headers)
    assert resp.status_code == 409


async def test_update_profile(client, admin_headers):
    resp = await client.put(
        "/api/admin/profile", json={"name": "Renamed"}, headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["admin"]["name"] == "Renamed"


async def test_malformed_token(client, admin):
    resp = await client.get("/api/admin/profile", headers=auth("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Not authorized, token failed"


async def test_token_for_deleted_account(client, admin_headers, admin, test_session_factory):
    async with test_session_factory() as session:
        await session.delete(await session.get(Admin, admin.id))
        await session.commit()
    resp = await client.get("/api/admin/profile", headers=admin_headers)
    assert resp.status_code == 401
