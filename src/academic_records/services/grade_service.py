"""Domain logic for recording and correcting grades."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import ChangeOperation, Course, Grade, Student
from ..utils.datetime import utcnow
from . import access_policy
from .access_policy import Operation, Table
from .change_capture import GradeChangeBuffer, grade_change_batch
from .errors import NotFound
from .validation import validate_grade
from .workflow_service import evaluate_graduation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeEntry:
    """A single grade to write as part of a batch."""

    student_id: int
    course_id: int
    grade: Optional[str]


def _ensure_student(session: Session, student_id: int) -> Student:
    stmt = select(Student).where(Student.student_id == student_id, Student.deleted_at.is_(None))
    student = session.execute(stmt).scalar_one_or_none()
    if student is None:
        raise NotFound("Student", student_id)
    return student


def _ensure_course(session: Session, course_id: int) -> Course:
    course = session.get(Course, course_id)
    if course is None:
        raise NotFound("Course", course_id)
    return course


def _locked_grade(session: Session, student_id: int, course_id: int) -> Optional[Grade]:
    stmt = (
        select(Grade)
        .where(Grade.student_id == student_id, Grade.course_id == course_id)
        .with_for_update()
    )
    return session.execute(stmt).scalar_one_or_none()


def _write_grade(session: Session, buffer: GradeChangeBuffer, entry: GradeEntry) -> Grade:
    grade = _locked_grade(session, entry.student_id, entry.course_id)
    if grade is None:
        grade = Grade(student_id=entry.student_id, course_id=entry.course_id, grade=entry.grade)
        session.add(grade)
        buffer.capture(
            ChangeOperation.INSERT,
            student_id=entry.student_id,
            course_id=entry.course_id,
            old_grade=None,
            new_grade=entry.grade,
        )
    else:
        buffer.capture(
            ChangeOperation.UPDATE,
            student_id=entry.student_id,
            course_id=entry.course_id,
            old_grade=grade.grade,
            new_grade=entry.grade,
        )
        grade.grade = entry.grade
        grade.updated_at = utcnow()
    session.flush()
    return grade


def record_grades(session: Session, entries: Iterable[GradeEntry], *, role: str) -> List[Grade]:
    """Insert or update several grades as one statement.

    Every entry is validated and every referenced student and course resolved
    before the first row is written. Changes are captured in a single batch and
    graduation is re-evaluated once per affected student.
    """

    access_policy.require(role, Table.GRADES, Operation.INSERT)
    access_policy.require(role, Table.GRADES, Operation.UPDATE)

    entries = [
        GradeEntry(entry.student_id, entry.course_id, validate_grade(entry.grade))
        for entry in entries
    ]
    for entry in entries:
        _ensure_student(session, entry.student_id)
        _ensure_course(session, entry.course_id)

    with grade_change_batch(session) as buffer:
        grades = [_write_grade(session, buffer, entry) for entry in entries]

    for student_id in dict.fromkeys(entry.student_id for entry in entries):
        evaluate_graduation(session, student_id)

    logger.info("recorded %d grade(s)", len(grades))
    return grades


def insert_or_update_grade(
    session: Session,
    *,
    student_id: int,
    course_id: int,
    grade: Optional[str],
    role: str,
) -> Grade:
    """Record a student's grade for a course, replacing any earlier result."""

    (written,) = record_grades(session, [GradeEntry(student_id, course_id, grade)], role=role)
    return written


def delete_grade(session: Session, *, student_id: int, course_id: int, role: str) -> None:
    """Remove a grade row, capturing its last value."""

    access_policy.require(role, Table.GRADES, Operation.DELETE)

    with grade_change_batch(session) as buffer:
        grade = _locked_grade(session, student_id, course_id)
        if grade is None:
            raise NotFound("Grade", f"({student_id}, {course_id})")
        delete_grade_rows(session, buffer, [grade])


def delete_grade_rows(session: Session, buffer: GradeChangeBuffer, grades: Sequence[Grade]) -> int:
    """Delete already-loaded grade rows, capturing one change per row."""

    for grade in grades:
        buffer.capture(
            ChangeOperation.DELETE,
            student_id=grade.student_id,
            course_id=grade.course_id,
            old_grade=grade.grade,
            new_grade=None,
        )
        session.delete(grade)
    session.flush()
    return len(grades)


def grades_for_student(session: Session, student_id: int) -> Sequence[Grade]:
    _ensure_student(session, student_id)
    stmt = select(Grade).where(Grade.student_id == student_id).order_by(Grade.course_id)
    return session.execute(stmt).scalars().all()
