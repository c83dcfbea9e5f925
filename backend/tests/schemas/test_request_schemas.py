"""Request schema tests — camelCase input, normalization and cross-field rules.

Tests cover:
    - Email normalization and password length (6 chars to 72 bytes)
    - UserRegister: semester required for students, privilege reason when privileged
    - UserProfileUpdate: blank university ID rejected
    - OrderCreate: priority fields, non-empty items
    - ExamCreate: UTC dates, upper-cased ID range
    - FeedbackCreate: rating bounds
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from canteen.schemas.accounts import LoginRequest, UserProfileUpdate, UserRegister
from canteen.schemas.exams import ExamCreate
from canteen.schemas.feedback import FeedbackCreate
from canteen.schemas.orders import OrderCreate


def _student(**overrides):
    data = {
        "name": "Asha", "email": "asha@kletech.ac.in", "uniId": "01FE21BCS042",
        "phoneNo": "9876543210", "password": "secret123", "department": "CSE",
        "semester": "5",
    }
    data.update(overrides)
    return data


# ─── accounts ───────────────────────────────────────────────────

def test_email_is_lowercased_and_stripped():
    login = LoginRequest.model_validate({"email": "  Asha@KLETech.ac.in ", "password": "x"})
    assert login.email == "asha@kletech.ac.in"


def test_email_format_enforced():
    with pytest.raises(ValidationError):
        LoginRequest.model_validate({"email": "not-an-email", "password": "x"})


def test_register_accepts_camel_case():
    user = UserRegister.model_validate(_student())
    assert user.uni_id == "01FE21BCS042"
    assert user.role.value == "student"


def test_register_short_password_rejected():
    with pytest.raises(ValidationError):
        UserRegister.model_validate(_student(password="123"))


@pytest.mark.parametrize("password", ["p" * 73, "é" * 37])
def test_register_password_over_72_bytes_rejected(password):
    with pytest.raises(ValidationError):
        UserRegister.model_validate(_student(password=password))


def test_register_password_at_72_bytes_ok():
    assert UserRegister.model_validate(_student(password="é" * 36)).password == "é" * 36


def test_student_requires_semester():
    with pytest.raises(ValidationError, match="semester is required"):
        UserRegister.model_validate(_student(semester=None))


def test_faculty_without_semester_ok():
    user = UserRegister.model_validate(_student(role="faculty", semester=None))
    assert user.semester is None


def test_privileged_user_needs_reason():
    with pytest.raises(ValidationError, match="privilegeReason"):
        UserRegister.model_validate(_student(isPrivileged=True))


def test_profile_update_blank_uni_id_rejected():
    with pytest.raises(ValidationError, match="University ID cannot be empty"):
        UserProfileUpdate.model_validate({"uniId": "   "})


def test_profile_update_is_partial():
    update = UserProfileUpdate.model_validate({"phoneNo": "9999999999"})
    assert update.model_dump(exclude_unset=True) == {"phone_no": "9999999999"}


# ─── orders ─────────────────────────────────────────────────────

def test_order_requires_items():
    with pytest.raises(ValidationError):
        OrderCreate.model_validate({"canteenId": str(uuid4()), "items": []})


def test_order_quantity_at_least_one():
    with pytest.raises(ValidationError):
        OrderCreate.model_validate({
            "canteenId": str(uuid4()),
            "items": [{"itemId": str(uuid4()), "quantity": 0}],
        })


def test_priority_order_requires_reason_and_details():
    base = {
        "canteenId": str(uuid4()),
        "items": [{"itemId": str(uuid4()), "quantity": 1}],
        "priority": True,
    }
    with pytest.raises(ValidationError, match="priorityReason"):
        OrderCreate.model_validate(base)
    with pytest.raises(ValidationError, match="priorityDetails"):
        OrderCreate.model_validate({**base, "priorityReason": "exam", "priorityDetails": " "})


def test_priority_reason_must_be_known():
    with pytest.raises(ValidationError):
        OrderCreate.model_validate({
            "canteenId": str(uuid4()),
            "items": [{"itemId": str(uuid4()), "quantity": 1}],
            "priority": True, "priorityReason": "hungry", "priorityDetails": "x",
        })


# ─── exams ──────────────────────────────────────────────────────

def test_exam_date_normalized_to_utc():
    exam = ExamCreate.model_validate({
        "examName": "DBMS", "examDate": "2025-05-01T10:00:00+05:30",
        "examTime": "10:00", "department": "CSE", "semester": "5",
        "startUniversityId": " 01fe21bcs001 ", "endUniversityId": "01fe21bcs100",
    })
    assert exam.exam_date == datetime(2025, 5, 1, 4, 30, tzinfo=timezone.utc)
    assert exam.start_university_id == "01FE21BCS001"


def test_naive_exam_date_assumed_utc():
    exam = ExamCreate.model_validate({
        "examName": "DBMS", "examDate": "2025-05-01T10:00:00",
        "examTime": "10:00", "department": "CSE", "semester": "5",
    })
    assert exam.exam_date.tzinfo == timezone.utc


# ─── feedback ───────────────────────────────────────────────────

@pytest.mark.parametrize("rating", [0, 6])
def test_feedback_rating_bounds(rating):
    with pytest.raises(ValidationError):
        FeedbackCreate.model_validate({"orderId": str(uuid4()), "rating": rating})
