"""Pre-write guards for student and grade rows."""

from __future__ import annotations

from typing import Optional

from ..models import EnrollmentStatus, GradeLetter
from .errors import RuleCode, RuleViolation

VALID_ENROLLMENT_STATUSES = frozenset(status.value for status in EnrollmentStatus)
VALID_GRADES = frozenset(letter.value for letter in GradeLetter)


def validate_enrollment_status(status: object) -> str:
    """Return the status unchanged or raise ``RuleViolation`` (20001)."""

    if isinstance(status, EnrollmentStatus):
        return status.value
    if not isinstance(status, str) or status not in VALID_ENROLLMENT_STATUSES:
        raise RuleViolation(RuleCode.INVALID_ENROLLMENT_STATUS, context=repr(status))
    return status


def validate_grade(grade: object) -> Optional[str]:
    """Return the letter (or ``None`` for ungraded) or raise ``RuleViolation`` (20002)."""

    if grade is None:
        return None
    if isinstance(grade, GradeLetter):
        return grade.value
    if not isinstance(grade, str) or grade not in VALID_GRADES:
        raise RuleViolation(RuleCode.INVALID_GRADE, context=repr(grade))
    return grade


def validate_credit_hours(credit_hours: object) -> int:
    if isinstance(credit_hours, bool) or not isinstance(credit_hours, int) or credit_hours <= 0:
        raise RuleViolation(RuleCode.INVALID_CREDIT_HOURS, context=repr(credit_hours))
    return credit_hours


def validate_student_name(name: object) -> str:
    """Return the stripped name or raise ``RuleViolation`` (20006) for null or blank input."""

    if not isinstance(name, str) or not name.strip():
        raise RuleViolation(RuleCode.INVALID_STUDENT_NAME, context=repr(name))
    return name.strip()
