import pytest

from academic_records.models import EnrollmentStatus, GradeLetter
from academic_records.services.errors import RuleCode, RuleViolation
from academic_records.services.validation import (
    validate_credit_hours,
    validate_enrollment_status,
    validate_grade,
)


@pytest.mark.parametrize("status", ["Active", "Inactive", "Graduated", EnrollmentStatus.GRADUATED])
def test_enrollment_status_whitelist_accepts_known_values(status):
    assert validate_enrollment_status(status) in {"Active", "Inactive", "Graduated"}


@pytest.mark.parametrize("status", ["Pending", "active", "", None, 3])
def test_enrollment_status_whitelist_rejects_everything_else(status):
    with pytest.raises(RuleViolation) as excinfo:
        validate_enrollment_status(status)

    assert excinfo.value.rule is RuleCode.INVALID_ENROLLMENT_STATUS
    assert excinfo.value.code == "20001"
    assert excinfo.value.message == "Invalid enrollment status"


def test_grade_whitelist_allows_letters_and_absent():
    assert [validate_grade(letter) for letter in "ABCDF"] == list("ABCDF")
    assert validate_grade(GradeLetter.B) == "B"
    assert validate_grade(None) is None


@pytest.mark.parametrize("grade", ["E", "a", "A+", "", 4])
def test_grade_whitelist_rejects_unknown_letters(grade):
    with pytest.raises(RuleViolation) as excinfo:
        validate_grade(grade)

    assert excinfo.value.code == "20002"
    assert excinfo.value.to_payload() == {"code": "20002", "message": "Invalid grade"}


def test_credit_hours_must_be_positive_integers():
    assert validate_credit_hours(4) == 4
    for bad in (0, -3, True, 2.5):
        with pytest.raises(RuleViolation):
            validate_credit_hours(bad)
