"""User route tests — registration, login, password reset, profile, admin deletes.

Tests cover:
    - POST /api/users/register: 201, campus domain enforced, duplicates -> 409
    - POST /api/users/login: 200 with token, unknown email -> 404
    - POST /api/users/reset-password
    - GET/PUT /api/users/profile
    - GET /api/users/ and DELETE /api/users/{id}: admin only, dependents removed
      in one transaction (a failure part-way leaves everything in place)
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.errors import DatabaseError
from canteen.models import Cart, CartItem, Feedback, Order, OrderItem, Payment, User
from tests.api.helpers import PASSWORD


def _register_body(**overrides):
    body = {
        "name": "Kiran", "email": "kiran@kletech.ac.in", "uniId": "01FE21BCS077",
        "phoneNo": "9123456780", "password": "secret123", "department": "CSE",
        "semester": "5",
    }
    body.update(overrides)
    return body


async def test_register_user(client):
    resp = await client.post("/api/users/register", json=_register_body())
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["uniId"] == "01FE21BCS077"
    assert user["role"] == "student"
    assert "password" not in user and "passwordHash" not in user


async def test_register_rejects_foreign_domain(client):
    resp = await client.post(
        "/api/users/register", json=_register_body(email="kiran@gmail.com"),
    )
    assert resp.status_code == 400
    assert "kletech.ac.in" in resp.json()["error"]["message"]


async def test_register_duplicate_email(client, student):
    resp = await client.post(
        "/api/users/register", json=_register_body(email=student.email),
    )
    assert resp.status_code == 409


async def test_register_duplicate_uni_id_case_insensitive(client, student):
    resp = await client.post(
        "/api/users/register", json=_register_body(uniId="01fe21bcs042"),
    )
    assert resp.status_code == 409


async def test_register_overlong_password_is_validation_error(client):
    resp = await client.post("/api/users/register", json=_register_body(password="p" * 100))
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("password:")
    assert [f["field"] for f in error["details"]["fields"]] == ["password"]


async def test_reset_password_overlong_is_validation_error(client, student):
    resp = await client.post(
        "/api/users/reset-password",
        json={"email": student.email, "newPassword": "ü" * 40},
    )
    assert resp.status_code == 400


async def test_register_missing_semester_is_validation_error(client):
    resp = await client.post(
        "/api/users/register", json=_register_body(semester=None),
    )
    assert resp.status_code == 400


async def test_login(client, student):
    resp = await client.post(
        "/api/users/login", json={"email": student.email, "password": PASSWORD},
    )
    assert resp.status_code == 200
    assert resp.json()["token"]
    assert resp.json()["user"]["email"] == student.email


async def test_login_unknown_user(client):
    resp = await client.post(
        "/api/users/login", json={"email": "nobody@kletech.ac.in", "password": PASSWORD},
    )
    assert resp.status_code == 404


async def test_reset_password_then_login(client, student):
    resp = await client.post(
        "/api/users/reset-password",
        json={"email": student.email, "newPassword": "brandnew1"},
    )
    assert resp.status_code == 200

    old = await client.post(
        "/api/users/login", json={"email": student.email, "password": PASSWORD},
    )
    new = await client.post(
        "/api/users/login", json={"email": student.email, "password": "brandnew1"},
    )
    assert old.status_code == 401
    assert new.status_code == 200


async def test_profile_roundtrip(client, student_headers):
    resp = await client.get("/api/users/profile", headers=student_headers)
    assert resp.json()["uniId"] == "01FE21BCS042"

    resp = await client.put(
        "/api/users/profile", json={"phoneNo": "9000011111", "semester": "6"},
        headers=student_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["phoneNo"] == "9000011111"
    assert resp.json()["user"]["semester"] == "6"


async def test_profile_uni_id_conflict(client, student_headers, faculty):
    resp = await client.put(
        "/api/users/profile", json={"uniId": faculty.uni_id}, headers=student_headers,
    )
    assert resp.status_code == 409


async def test_profile_rejects_staff_token(client, staff_headers):
    resp = await client.get("/api/users/profile", headers=staff_headers)
    assert resp.status_code == 403


async def test_list_users_admin_only(client, admin_headers, student_headers, student, faculty):
    resp = await client.get("/api/users/", headers=admin_headers)
    assert resp.status_code == 200
    assert {u["email"] for u in resp.json()} == {student.email, faculty.email}
    assert (await client.get("/api/users/", headers=student_headers)).status_code == 403


@pytest.fixture
async def student_history(student, canteen, menu_items, seed):
    """A completed order with items, payment and feedback, plus a filled cart."""
    dosa = menu_items[0]
    order = Order(
        email=student.email, order_date="2025-03-10", order_time="12:00",
        status="completed", total_amount=40.0, canteen_id=canteen.id,
        delivery_address="Block A", items=[
            OrderItem(menu_item_id=dosa.id, quantity=1, item_name=dosa.item_name, price=40.0),
        ],
    )
    cart = Cart(user_id=student.id, items=[
        CartItem(
            menu_item_id=dosa.id, canteen_id=canteen.id, name=dosa.item_name,
            price=40.0, quantity=2,
        ),
    ])
    await seed(order, cart)
    await seed(
        Payment(
            order_id=order.id, payment_date="2025-03-10", payment_time="12:01",
            payment_method="cash", payment_status="completed", email=student.email,
            amount=40.0, transaction_id="TXN-1",
        ),
        Feedback(order_id=order.id, email=student.email, canteen_id=canteen.id, rating=5),
    )
    return order


async def _row_counts(session_factory):
    async with session_factory() as session:
        return {
            model.__name__: (
                await session.execute(select(func.count()).select_from(model))
            ).scalar_one()
            for model in (User, Cart, CartItem, Order, OrderItem, Payment, Feedback)
        }


async def test_delete_user_removes_dependents(
    client, admin_headers, student, student_history, test_session_factory,
):
    resp = await client.delete(f"/api/users/{student.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["deleted"] == {"carts": 1, "feedback": 1, "payments": 1, "orders": 1}
    assert set((await _row_counts(test_session_factory)).values()) == {0}


async def test_delete_user_is_all_or_nothing(
    client, admin_headers, student, student_history, test_session_factory, monkeypatch,
):
    original_delete = AsyncSession.delete

    async def failing_delete(self, instance):
        if isinstance(instance, User):
            raise DatabaseError("connection lost", "delete")
        await original_delete(self, instance)

    # The user row goes last, after its dependents are deleted
    monkeypatch.setattr(AsyncSession, "delete", failing_delete)

    resp = await client.delete(f"/api/users/{student.id}", headers=admin_headers)
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "DATABASE_ERROR"

    monkeypatch.undo()
    assert set((await _row_counts(test_session_factory)).values()) == {1}


async def test_delete_unknown_user(client, admin_headers):
    resp = await client.delete(f"/api/users/{uuid4()}", headers=admin_headers)
    assert resp.status_code == 404
