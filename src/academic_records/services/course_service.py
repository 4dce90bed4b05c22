"""Domain logic for the course catalog and enrollments."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Course, Enrollment, Student
from ..utils.datetime import term_label, utcnow
from . import access_policy
from .access_policy import Operation, Table
from .errors import Conflict, NotFound, RuleCode, RuleViolation
from .validation import validate_credit_hours
from .workflow_service import sync_enrollment_terms

logger = logging.getLogger(__name__)


def _locked_course(session: Session, course_id: int) -> Course:
    stmt = select(Course).where(Course.course_id == course_id).with_for_update()
    course = session.execute(stmt).scalar_one_or_none()
    if course is None:
        raise NotFound("Course", course_id)
    return course


def get_course(session: Session, course_id: int) -> Course:
    course = session.get(Course, course_id)
    if course is None:
        raise NotFound("Course", course_id)
    return course


def create_course(
    session: Session,
    *,
    course_id: int,
    title: str,
    role: str,
    credit_hours: int = 3,
    offering_term: Optional[str] = None,
    is_mandatory: bool = True,
) -> Course:
    """Add a course to the catalog, offered in the current term unless told otherwise."""

    access_policy.require(role, Table.COURSES, Operation.INSERT)
    validate_credit_hours(credit_hours)
    if session.get(Course, course_id) is not None:
        raise Conflict("Course", course_id)

    course = Course(
        course_id=course_id,
        title=title,
        credit_hours=credit_hours,
        offering_term=offering_term or term_label(),
        is_mandatory=is_mandatory,
    )
    session.add(course)
    session.flush()
    return course


def rename_course(session: Session, *, course_id: int, new_title: str, role: str) -> int:
    """Change a course title and re-sync the term of all its enrollments.

    Returns the number of enrollment rows updated.
    """

    access_policy.require(role, Table.COURSES, Operation.UPDATE)

    course = _locked_course(session, course_id)
    old_title = course.title
    course.title = new_title
    course.updated_at = utcnow()
    session.flush()

    affected = sync_enrollment_terms(session, course)
    logger.info("course %s renamed from %r to %r", course_id, old_title, new_title)
    return affected


def reschedule_course(session: Session, *, course_id: int, offering_term: str, role: str) -> int:
    """Move a course to another offering term, cascading to its enrollments."""

    access_policy.require(role, Table.COURSES, Operation.UPDATE)

    course = _locked_course(session, course_id)
    course.offering_term = offering_term
    course.updated_at = utcnow()
    session.flush()

    return sync_enrollment_terms(session, course)


def enroll_student(session: Session, *, student_id: int, course_id: int, role: str) -> Enrollment:
    """Register a student in the course's current offering."""

    access_policy.require(role, Table.ENROLLMENTS, Operation.INSERT)

    student = session.get(Student, student_id)
    if student is None or student.deleted_at is not None:
        raise NotFound("Student", student_id)
    course = get_course(session, course_id)

    existing_stmt = select(Enrollment).where(
        Enrollment.student_id == student_id,
        Enrollment.course_id == course_id,
        Enrollment.term == course.offering_term,
    )
    if session.execute(existing_stmt).scalar_one_or_none() is not None:
        raise RuleViolation(
            RuleCode.DUPLICATE_ENROLLMENT,
            context=f"student {student_id} in course {course_id} for {course.offering_term}",
        )

    enrollment = Enrollment(student_id=student_id, course_id=course_id, term=course.offering_term)
    session.add(enrollment)
    session.flush()
    session.refresh(enrollment)
    return enrollment
