"""Exam route tests — schedule listings and admin management.

Tests cover:
    - /active, /upcoming, /next24hours: public, active only, date windows
    - /user: caller's department and semester
    - POST/PUT: admin only, university ID range required, IDs upper-cased
    - GET /{id} requires a token; DELETE removes the exam
"""

from datetime import timedelta

import pytest

from canteen.db.base import utcnow
from canteen.models import ExamDetails


def _exam(name, offset, **fields):
    values = {
        "exam_name": name, "exam_date": utcnow() + offset, "exam_time": "10:00",
        "department": "CSE", "semester": "5",
        "start_university_id": "01FE21BCS001", "end_university_id": "01FE21BCS100",
    }
    values.update(fields)
    return ExamDetails(**values)


@pytest.fixture
async def schedule(seed):
    return await seed(
        _exam("Past", timedelta(days=-2)),
        _exam("Soon", timedelta(hours=2)),
        _exam("Later", timedelta(days=4)),
        _exam("Cancelled", timedelta(hours=5), is_active=False),
        _exam("Mechanics", timedelta(days=1), department="ME"),
    )


def _create_body(**overrides):
    body = {
        "examName": "Networks", "examDate": (utcnow() + timedelta(days=3)).isoformat(),
        "examTime": "09:30", "department": "CSE", "semester": "5",
        "startUniversityId": "01fe21bcs001", "endUniversityId": "01fe21bcs120",
    }
    body.update(overrides)
    return body


async def test_active_excludes_past_and_inactive(client, schedule):
    resp = await client.get("/api/exams/active")
    assert resp.status_code == 200
    assert [e["examName"] for e in resp.json()] == ["Soon", "Mechanics", "Later"]

    upcoming = await client.get("/api/exams/upcoming")
    assert upcoming.json() == resp.json()


async def test_next_24_hours(client, schedule):
    resp = await client.get("/api/exams/next24hours")
    names = [e["examName"] for e in resp.json()]
    assert "Soon" in names and "Mechanics" in names
    assert "Later" not in names and "Cancelled" not in names


async def test_user_exams_match_profile(client, student_headers, schedule):
    resp = await client.get("/api/exams/user", headers=student_headers)
    assert [e["examName"] for e in resp.json()] == ["Past", "Soon", "Later"]


async def test_admin_lists_everything(client, admin_headers, schedule):
    resp = await client.get("/api/exams/", headers=admin_headers)
    assert len(resp.json()) == 5

    resp = await client.get("/api/exams/department/ME/semester/5", headers=admin_headers)
    assert [e["examName"] for e in resp.json()] == ["Mechanics"]


async def test_get_exam_requires_token(client, exam, student_headers):
    assert (await client.get(f"/api/exams/{exam.id}")).status_code == 401
    resp = await client.get(f"/api/exams/{exam.id}", headers=student_headers)
    assert resp.json()["examName"] == "Operating Systems"


async def test_create_exam(client, admin_headers):
    resp = await client.post("/api/exams/", json=_create_body(), headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["startUniversityId"] == "01FE21BCS001"
    assert body["endUniversityId"] == "01FE21BCS120"
    assert body["isActive"] is True
    assert body["examCode"]


async def test_create_requires_id_range(client, admin_headers):
    resp = await client.post(
        "/api/exams/", json=_create_body(endUniversityId=None), headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["details"]["errors"] == {
        "endUniversityId": "End University ID is required",
    }


async def test_create_forbidden_for_users(client, student_headers):
    resp = await client.post("/api/exams/", json=_create_body(), headers=student_headers)
    assert resp.status_code == 403


async def test_update_and_delete(client, admin_headers, exam, fetch):
    resp = await client.put(
        f"/api/exams/{exam.id}",
        json=_create_body(examName="OS Re-exam", isActive=False),
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["examName"] == "OS Re-exam"
    assert resp.json()["isActive"] is False

    resp = await client.delete(f"/api/exams/{exam.id}", headers=admin_headers)
    assert resp.json()["message"] == "Exam detail deleted successfully"
    assert await fetch(ExamDetails, exam.id) is None
