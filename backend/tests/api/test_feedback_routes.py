"""Feedback route tests — submission rules, canteen ratings, staff replies, admin stats.

Tests cover:
    - POST /api/feedback/: delivered/completed only, owner only, once per order
    - Canteen aggregate ratings recomputed after each submission
    - /order/{id}/exists and /canteen/{id}/can-submit
    - Staff dashboard and responses limited to their own canteen
    - Public testimonials, admin stats and overview
"""

from uuid import uuid4

import pytest

from canteen.models import Canteen, Feedback, Order


@pytest.fixture
def delivered_order(seed, canteen, student):
    async def _make(status="delivered", email=None):
        return await seed(Order(
            email=email or student.email, order_date="2025-03-10", order_time="12:00",
            status=status, total_amount=80.0, canteen_id=canteen.id,
            delivery_address="Block A",
        ))
    return _make


@pytest.fixture
def feedback_row(seed, canteen, student):
    async def _make(order, rating=5, comment=None, **ratings):
        return await seed(Feedback(
            order_id=order.id, email=student.email, canteen_id=canteen.id,
            rating=rating, comment=comment, **ratings,
        ))
    return _make


async def test_submit_updates_canteen_ratings(client, student_headers, canteen, delivered_order, fetch):
    first = await delivered_order()
    second = await delivered_order(status="completed")

    resp = await client.post(
        "/api/feedback/",
        json={"orderId": str(first.id), "rating": 5, "foodQuality": 4, "comment": "Tasty"},
        headers=student_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["feedback"]["canteen"]["name"] == "Main Canteen"

    await client.post(
        "/api/feedback/", json={"orderId": str(second.id), "rating": 2},
        headers=student_headers,
    )
    row = await fetch(Canteen, canteen.id)
    assert row.average_rating == 3.5
    assert row.total_ratings == 2
    assert row.food_quality == 4.0


async def test_submit_before_delivery_rejected(client, student_headers, delivered_order):
    order = await delivered_order(status="ready")
    resp = await client.post(
        "/api/feedback/", json={"orderId": str(order.id), "rating": 4}, headers=student_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ORDER_NOT_DELIVERED"


async def test_submit_for_someone_elses_order(client, student_headers, faculty, delivered_order):
    order = await delivered_order(email=faculty.email)
    resp = await client.post(
        "/api/feedback/", json={"orderId": str(order.id), "rating": 4}, headers=student_headers,
    )
    assert resp.status_code == 403


async def test_submit_unknown_order(client, student_headers):
    resp = await client.post(
        "/api/feedback/", json={"orderId": str(uuid4()), "rating": 4}, headers=student_headers,
    )
    assert resp.status_code == 404


async def test_submit_twice_conflicts(client, student_headers, delivered_order):
    order = await delivered_order()
    body = {"orderId": str(order.id), "rating": 4}
    assert (await client.post("/api/feedback/", json=body, headers=student_headers)).status_code == 201
    resp = await client.post("/api/feedback/", json=body, headers=student_headers)
    assert resp.status_code == 409


async def test_submit_after_canteen_deleted(
    client, student_headers, admin_headers, canteen, delivered_order, fetch,
):
    order = await delivered_order(status="completed")
    assert (await client.delete(f"/api/canteens/{canteen.id}", headers=admin_headers)).status_code == 200

    resp = await client.post(
        "/api/feedback/", json={"orderId": str(order.id), "rating": 4, "comment": "Missed it"},
        headers=student_headers,
    )
    assert resp.status_code == 201
    feedback = resp.json()["feedback"]
    assert feedback["canteenId"] == str(canteen.id)
    assert feedback["canteen"] is None
    assert await fetch(Canteen, canteen.id) is None


async def test_exists_and_can_submit(client, student_headers, canteen, other_canteen, delivered_order, feedback_row):
    order = await delivered_order()
    resp = await client.get(f"/api/feedback/order/{order.id}/exists", headers=student_headers)
    assert resp.json() == {"exists": False}

    await feedback_row(order)
    resp = await client.get(f"/api/feedback/order/{order.id}/exists", headers=student_headers)
    assert resp.json() == {"exists": True}

    resp = await client.get(f"/api/feedback/canteen/{canteen.id}/can-submit", headers=student_headers)
    assert resp.json() == {"canSubmit": True}
    resp = await client.get(
        f"/api/feedback/canteen/{other_canteen.id}/can-submit", headers=student_headers,
    )
    assert resp.json() == {"canSubmit": False}


async def test_user_lists_own_feedback(client, student_headers, delivered_order, feedback_row):
    await feedback_row(await delivered_order(), comment="Good")
    resp = await client.get("/api/feedback/user", headers=student_headers)
    assert [f["comment"] for f in resp.json()] == ["Good"]


async def test_staff_dashboard_stats(client, staff_headers, canteen, delivered_order, feedback_row):
    await feedback_row(await delivered_order(), rating=5, food_quality=4)
    await feedback_row(await delivered_order(), rating=3)
    resp = await client.get(f"/api/feedback/canteen/{canteen.id}", headers=staff_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    assert body["stats"]["overallRating"] == 4.0
    assert body["stats"]["foodQuality"] == 2.0


async def test_staff_dashboard_other_canteen(client, other_staff_headers, canteen):
    resp = await client.get(f"/api/feedback/canteen/{canteen.id}", headers=other_staff_headers)
    assert resp.status_code == 403


async def test_staff_responds(client, staff_headers, other_staff_headers, delivered_order, feedback_row):
    feedback = await feedback_row(await delivered_order(), rating=2, comment="Cold food")
    url = f"/api/feedback/{feedback.id}/respond"

    resp = await client.put(url, json={"response": "Sorry"}, headers=other_staff_headers)
    assert resp.status_code == 403

    resp = await client.put(url, json={"response": "Sorry, fixed now"}, headers=staff_headers)
    assert resp.status_code == 200
    assert resp.json()["feedback"]["staffResponse"] == "Sorry, fixed now"
    assert resp.json()["feedback"]["isResolved"] is True


async def test_testimonials(client, delivered_order, feedback_row):
    for rating, comment in [(5, "Great"), (4, "Nice"), (3, "Okay"), (5, "  "), (5, None), (4, "Fast")]:
        await feedback_row(await delivered_order(), rating=rating, comment=comment)
    resp = await client.get("/api/feedback/testimonials")
    assert resp.status_code == 200
    comments = [f["comment"] for f in resp.json()]
    assert len(comments) == 3
    assert set(comments) <= {"Great", "Nice", "Fast"}


async def test_admin_stats_and_overview(client, admin_headers, canteen, other_canteen, delivered_order, feedback_row):
    order = await delivered_order()
    await feedback_row(order, rating=4)
    await feedback_row(await delivered_order(), rating=5, is_resolved=True)

    resp = await client.get("/api/feedback/stats", headers=admin_headers)
    stats = {s["canteenName"]: s for s in resp.json()}
    assert stats["Main Canteen"]["averageRating"] == 4.5
    assert stats["Main Canteen"]["totalFeedback"] == 2
    assert stats["Hostel Mess"]["totalFeedback"] == 0

    resp = await client.get("/api/feedback/", headers=admin_headers)
    assert resp.json()["stats"]["totalFeedback"] == 2
    assert resp.json()["stats"]["resolvedFeedback"] == 1


async def test_overview_admin_only(client, staff_headers):
    assert (await client.get("/api/feedback/", headers=staff_headers)).status_code == 403
