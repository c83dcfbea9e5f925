"""Priority eligibility tests — university ID parsing, range checks, exam validation.

Tests cover:
    - parse_university_id: valid IDs, lowercase input, non-matching formats
    - university_id_in_range: inclusive bounds, prefix mismatch, string fallback
    - requires_exam_check: only student exam-priority orders are checked
    - validate_exam_priority: each failure code, happy path
"""

from dataclasses import dataclass
from uuid import uuid4

import pytest

from canteen.core.errors import PriorityValidationError
from canteen.core.priority import (
    parse_university_id,
    priority_fee_for,
    requires_exam_check,
    university_id_in_range,
    validate_exam_priority,
)


@dataclass
class _Exam:
    exam_name: str = "Operating Systems"
    semester: str = "5"
    start_university_id: str | None = "01FE21BCS001"
    end_university_id: str | None = "01FE21BCS100"


@dataclass
class _Caller:
    role: str = "student"
    uni_id: str | None = "01FE21BCS042"
    semester: str | None = "5"


# ─── parse_university_id ────────────────────────────────────────

def test_parse_splits_components():
    parsed = parse_university_id("01FE21BCS042")
    assert parsed.prefix == ("01", "FE", "21", "BCS")
    assert parsed.number == 42


def test_parse_accepts_lowercase_and_whitespace():
    assert parse_university_id("  01fe21bcs007 ").number == 7


def test_parse_two_letter_department():
    assert parse_university_id("02FE22EC015").department == "EC"


def test_parse_rejects_other_formats():
    assert parse_university_id("FAC001") is None
    assert parse_university_id("01FE21BCS0042") is None


# ─── university_id_in_range ─────────────────────────────────────

@pytest.mark.parametrize("uni_id", ["01FE21BCS001", "01FE21BCS050", "01FE21BCS100"])
def test_range_bounds_inclusive(uni_id):
    assert university_id_in_range(uni_id, "01FE21BCS001", "01FE21BCS100")


def test_range_rejects_number_outside():
    assert not university_id_in_range("01FE21BCS101", "01FE21BCS001", "01FE21BCS100")


def test_range_rejects_different_batch():
    """Same roll number in another batch is not eligible."""
    assert not university_id_in_range("01FE22BCS050", "01FE21BCS001", "01FE21BCS100")


def test_range_rejects_different_department():
    assert not university_id_in_range("01FE21BEC050", "01FE21BCS001", "01FE21BCS100")


def test_range_falls_back_to_string_comparison():
    assert university_id_in_range("b200", "A100", "C300")
    assert not university_id_in_range("D400", "A100", "C300")


# ─── requires_exam_check ────────────────────────────────────────

def test_exam_check_only_for_student_exam_priority():
    assert requires_exam_check(True, "exam", "student")
    assert not requires_exam_check(False, "exam", "student")
    assert not requires_exam_check(True, "medical", "student")
    assert not requires_exam_check(True, "exam", "faculty")


def test_priority_fee_only_when_priority():
    assert priority_fee_for(True, 5) == 5
    assert priority_fee_for(False, 5) == 0


# ─── validate_exam_priority ─────────────────────────────────────

def test_validate_passes_for_eligible_student():
    validate_exam_priority(_Caller(), uuid4(), _Exam())


def test_validate_requires_exam_id():
    with pytest.raises(PriorityValidationError) as exc:
        validate_exam_priority(_Caller(), None, None)
    assert exc.value.code == "NO_EXAM_SELECTED_ERROR"


def test_validate_missing_exam():
    with pytest.raises(PriorityValidationError) as exc:
        validate_exam_priority(_Caller(), uuid4(), None)
    assert exc.value.code == "EXAM_NOT_FOUND_ERROR"
    assert exc.value.message.startswith("Priority order validation failed")


def test_validate_missing_caller_id():
    with pytest.raises(PriorityValidationError) as exc:
        validate_exam_priority(_Caller(uni_id=None), uuid4(), _Exam())
    assert exc.value.code == "MISSING_ID_INFORMATION"


def test_validate_semester_mismatch():
    with pytest.raises(PriorityValidationError) as exc:
        validate_exam_priority(_Caller(semester="3"), uuid4(), _Exam())
    assert exc.value.code == "SEMESTER_MISMATCH_ERROR"
    assert exc.value.details == {"userSemester": "3", "examSemester": "5"}


def test_validate_exam_without_range():
    with pytest.raises(PriorityValidationError) as exc:
        validate_exam_priority(_Caller(), uuid4(), _Exam(end_university_id=None))
    assert exc.value.code == "MISSING_ID_INFORMATION"
    assert exc.value.details["missing"] == ["exam end university ID"]


def test_validate_id_outside_range_reports_range():
    with pytest.raises(PriorityValidationError) as exc:
        validate_exam_priority(_Caller(uni_id="01FE21BCS142"), uuid4(), _Exam())
    assert exc.value.code == "UNIVERSITY_ID_RANGE_ERROR"
    assert exc.value.http_status == 400
    assert exc.value.details["validRange"] == {
        "start": "01FE21BCS001", "end": "01FE21BCS100",
    }
