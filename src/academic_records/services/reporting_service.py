"""Lazy read-only traversals used by reports and batch jobs.

Each function returns a generator that runs its query when first advanced.
Calling the function again restarts the traversal from the beginning.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import ChangeOperation, Enrollment, EnrollmentStatus, Grade, GradeChangeLog, Student
from .metrics_service import points_expression

FETCH_BATCH_SIZE = 100
UNGRADED = "ungraded"


def _stream(session: Session, stmt) -> Iterator:
    """Iterate a result in batches and release the cursor when iteration stops early."""

    result = session.execute(stmt)
    try:
        yield from result
    finally:
        result.close()


def students_enrolled_in_term(session: Session, term: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(student_id, name)`` for each current student with an enrollment in ``term``."""

    stmt = (
        select(Student.student_id, Student.name)
        .join(Enrollment, Enrollment.student_id == Student.student_id)
        .where(Enrollment.term == term, Student.deleted_at.is_(None))
        .distinct()
        .order_by(Student.student_id)
        .execution_options(yield_per=FETCH_BATCH_SIZE)
    )
    for student_id, name in _stream(session, stmt):
        yield student_id, name


def at_risk_students(
    session: Session,
    *,
    gpa_threshold: Optional[float] = None,
) -> Iterator[Tuple[int, str, float]]:
    """Yield ``(student_id, name, gpa)`` for Active students below the GPA threshold.

    Ungraded rows score 0. Students without any grade rows have no GPA and
    are not reported. Deleted students are skipped.
    """

    threshold = get_settings().at_risk_gpa_threshold if gpa_threshold is None else gpa_threshold
    gpa = func.avg(points_expression()).label("gpa")
    stmt = (
        select(Student.student_id, Student.name, gpa)
        .join(Grade, Grade.student_id == Student.student_id)
        .where(
            Student.enrollment_status == EnrollmentStatus.ACTIVE.value,
            Student.deleted_at.is_(None),
        )
        .group_by(Student.student_id, Student.name)
        .having(gpa < threshold)
        .order_by(Student.student_id)
        .execution_options(yield_per=FETCH_BATCH_SIZE)
    )
    for student_id, name, value in _stream(session, stmt):
        yield student_id, name, float(value)


def describe_grade_change(change: GradeChangeLog) -> str:
    """Render one grade change as a human readable sentence."""

    old = change.old_grade or UNGRADED
    new = change.new_grade or UNGRADED
    if change.operation is ChangeOperation.INSERT and change.new_grade is None:
        return f"Student {change.student_id} was recorded as ungraded in course {change.course_id}"
    if change.operation is ChangeOperation.INSERT:
        return f"Student {change.student_id} received grade {new} in course {change.course_id}"
    if change.operation is ChangeOperation.DELETE:
        return f"Student {change.student_id} grade {old} in course {change.course_id} was removed"
    return (
        f"Student {change.student_id} grade in course {change.course_id} "
        f"changed from {old} to {new}"
    )


def audit_narrative_for_recent_grade_changes(
    session: Session,
    *,
    limit: Optional[int] = None,
) -> Iterator[str]:
    """Yield narratives for the most recent grade changes, oldest first."""

    limit = get_settings().narrative_limit if limit is None else limit
    recent = (
        select(GradeChangeLog.change_id)
        .order_by(GradeChangeLog.change_id.desc())
        .limit(limit)
    )
    stmt = (
        select(GradeChangeLog)
        .where(GradeChangeLog.change_id.in_(recent))
        .order_by(GradeChangeLog.change_id.asc())
        .execution_options(yield_per=FETCH_BATCH_SIZE)
    )
    for (change,) in _stream(session, stmt):
        yield describe_grade_change(change)
