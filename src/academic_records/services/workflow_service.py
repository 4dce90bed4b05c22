"""Reactive rules that run after grade and course writes."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import AuditAction, Course, Enrollment, EnrollmentStatus, Grade, Student
from ..utils.datetime import utcnow
from .audit_service import SYSTEM_ROLE, record_student_audit
from .metrics_service import PASSING_GRADES, completed_credits

logger = logging.getLogger(__name__)


def _missing_mandatory_courses(session: Session, student_id: int) -> list[int]:
    """Mandatory courses the student is enrolled in without a passing grade."""

    passed = (
        select(Grade.course_id)
        .where(Grade.student_id == student_id, Grade.grade.in_(sorted(PASSING_GRADES)))
    )
    stmt = (
        select(Course.course_id)
        .join(Enrollment, Enrollment.course_id == Course.course_id)
        .where(
            Enrollment.student_id == student_id,
            Course.is_mandatory,
            Course.course_id.not_in(passed),
        )
        .distinct()
        .order_by(Course.course_id)
    )
    return list(session.execute(stmt).scalars())


def evaluate_graduation(
    session: Session,
    student_id: int,
    *,
    required_credits: Optional[int] = None,
) -> bool:
    """Graduate an Active student whose program requirements are satisfied.

    Returns True only when this call changed the status. Students that are
    Inactive, already Graduated or deleted are left alone.
    """

    threshold = get_settings().graduation_credit_threshold if required_credits is None else required_credits

    stmt = select(Student).where(Student.student_id == student_id).with_for_update()
    student = session.execute(stmt).scalar_one_or_none()
    if student is None or student.deleted_at is not None:
        return False
    if student.enrollment_status != EnrollmentStatus.ACTIVE.value:
        return False

    credits = completed_credits(session, student_id) or 0
    if credits < threshold:
        return False
    if _missing_mandatory_courses(session, student_id):
        return False

    record_student_audit(
        session,
        action=AuditAction.UPDATE,
        student_id=student.student_id,
        actor_role=SYSTEM_ROLE,
        changes={"enrollment_status": [student.enrollment_status, EnrollmentStatus.GRADUATED.value]},
    )
    student.enrollment_status = EnrollmentStatus.GRADUATED.value
    student.updated_at = utcnow()
    session.flush()
    logger.info("student %s graduated with %d completed credits", student_id, credits)
    return True


def sweep_graduations(session: Session, *, required_credits: Optional[int] = None) -> dict[str, int]:
    """Re-evaluate graduation for every Active, non-deleted student.

    Returns summary statistics useful for logging/testing.
    """

    summary = {"students_evaluated": 0, "students_graduated": 0}
    student_ids = session.execute(
        select(Student.student_id)
        .where(
            Student.enrollment_status == EnrollmentStatus.ACTIVE.value,
            Student.deleted_at.is_(None),
        )
        .order_by(Student.student_id)
    ).scalars().all()

    for student_id in student_ids:
        summary["students_evaluated"] += 1
        if evaluate_graduation(session, student_id, required_credits=required_credits):
            summary["students_graduated"] += 1

    return summary


def sync_enrollment_terms(session: Session, course: Course) -> int:
    """Set ``term`` on every enrollment of the course to its offering term.

    Issued as a single UPDATE so the cascade commits or rolls back with the
    course change. Returns the number of enrollment rows matched.
    """

    result = session.execute(
        update(Enrollment)
        .where(Enrollment.course_id == course.course_id)
        .values(term=course.offering_term)
        .execution_options(synchronize_session="evaluate")
    )
    affected = result.rowcount or 0
    logger.info(
        "synced %d enrollment term(s) for course %s to %s",
        affected,
        course.course_id,
        course.offering_term,
    )
    return affected
