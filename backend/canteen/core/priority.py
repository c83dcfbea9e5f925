"""Priority Order Eligibility — university-ID range checks against an exam.

Invariants:
    - Only priority orders with reason "exam" placed by students are checked
    - IDs matching UNIVERSITY_ID_PATTERN are compared component-wise: the four
      prefix groups must equal both range ends, the 3-digit suffix must lie in
      [start, end] inclusive
    - IDs that do not match the pattern fall back to upper-cased string comparison
    - All checks raise PriorityValidationError; nothing here touches the database

Design Decisions:
    - Exam and caller passed as Protocols so the ORM models satisfy them directly
"""

import re
from typing import NamedTuple, Protocol
from uuid import UUID

from canteen.core.domain_types import PriorityReason, UserRole
from canteen.core.errors import PriorityValidationError

# e.g. 01FE21BCS042 -> year, FE, batch, department, roll number
UNIVERSITY_ID_PATTERN = re.compile(
    r"^(\d{2})([A-Z]{2})(\d{2})([A-Z]{2,3})(\d{3})$", re.IGNORECASE,
)


class ExamLike(Protocol):
    exam_name: str
    semester: str
    start_university_id: str | None
    end_university_id: str | None


class PriorityCaller(Protocol):
    role: str
    uni_id: str | None
    semester: str | None


class UniversityId(NamedTuple):
    year: str
    fe: str
    batch: str
    department: str
    number: int

    @property
    def prefix(self) -> tuple[str, str, str, str]:
        return (self.year, self.fe, self.batch, self.department)


def parse_university_id(value: str) -> UniversityId | None:
    """Split a university ID into its components, or None if it doesn't match."""
    match = UNIVERSITY_ID_PATTERN.match(value.strip().upper())
    if not match:
        return None
    year, fe, batch, dept, number = match.groups()
    return UniversityId(year, fe, batch, dept, int(number))


def university_id_in_range(uni_id: str, start: str, end: str) -> bool:
    """True if uni_id lies inside the [start, end] range."""
    user, low, high = (
        parse_university_id(uni_id),
        parse_university_id(start),
        parse_university_id(end),
    )
    if user and low and high:
        if not (user.prefix == low.prefix == high.prefix):
            return False
        return low.number <= user.number <= high.number

    user_upper, start_upper, end_upper = (
        uni_id.strip().upper(), start.strip().upper(), end.strip().upper(),
    )
    return start_upper <= user_upper <= end_upper


def requires_exam_check(
    priority: bool, reason: str | None, caller_role: str,
) -> bool:
    return (
        priority
        and reason == PriorityReason.EXAM.value
        and caller_role == UserRole.STUDENT.value
    )


def validate_exam_priority(
    caller: PriorityCaller, exam_id: UUID | None, exam: ExamLike | None,
) -> None:
    """Raise PriorityValidationError unless caller may place an exam-priority order."""
    if exam_id is None:
        raise PriorityValidationError(
            "No exam selected", "NO_EXAM_SELECTED_ERROR",
            {"reason": "You must select an exam to place a priority order with exam reason"},
        )
    if exam is None:
        raise PriorityValidationError("Exam not found", "EXAM_NOT_FOUND_ERROR")
    if not caller.uni_id:
        raise PriorityValidationError(
            "Missing university ID", "MISSING_ID_INFORMATION",
            {"reason": "Your profile does not have a university ID. Please update your profile."},
        )
    if exam.semester != caller.semester:
        raise PriorityValidationError(
            "Your semester does not match the exam semester",
            "SEMESTER_MISMATCH_ERROR",
            {"userSemester": caller.semester, "examSemester": exam.semester},
        )
    if not exam.start_university_id or not exam.end_university_id:
        missing = [
            label for label, value in (
                ("exam start university ID", exam.start_university_id),
                ("exam end university ID", exam.end_university_id),
            ) if not value
        ]
        raise PriorityValidationError(
            "Missing university ID or exam range information",
            "MISSING_ID_INFORMATION",
            {"missing": missing},
        )
    if not university_id_in_range(
        caller.uni_id, exam.start_university_id, exam.end_university_id,
    ):
        raise PriorityValidationError(
            "Your university ID is not eligible for this exam",
            "UNIVERSITY_ID_RANGE_ERROR",
            {
                "studentId": caller.uni_id,
                "validRange": {
                    "start": exam.start_university_id,
                    "end": exam.end_university_id,
                },
                "examName": exam.exam_name,
            },
        )


def priority_fee_for(priority: bool, fee: int) -> int:
    return fee if priority else 0
