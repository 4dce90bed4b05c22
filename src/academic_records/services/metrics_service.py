"""Read-only grade aggregates for students and courses."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from ..models import Course, Grade, Student
from .errors import NotFound

GRADE_POINTS = {"A": 4, "B": 3, "C": 2, "D": 1}
PASSING_GRADES = frozenset(GRADE_POINTS)


def grade_points(letter: Optional[str]) -> int:
    """Map a letter grade to points; F and anything unrecognised score 0."""

    return GRADE_POINTS.get(letter, 0)


def points_expression():
    return case(
        *((Grade.grade == letter, points) for letter, points in GRADE_POINTS.items()),
        else_=0,
    )


def _ensure_student(session: Session, student_id: int) -> Student:
    student = session.get(Student, student_id)
    if student is None:
        raise NotFound("Student", student_id)
    return student


def _ensure_course(session: Session, course_id: int) -> Course:
    course = session.get(Course, course_id)
    if course is None:
        raise NotFound("Course", course_id)
    return course


def _average(session: Session, *criteria) -> Optional[float]:
    # Ungraded rows fall through to else_=0; AVG is NULL only over zero rows.
    stmt = select(func.avg(points_expression())).where(*criteria)
    value = session.execute(stmt).scalar_one()
    return None if value is None else float(value)


def calculate_average_grade(session: Session, course_id: int) -> Optional[float]:
    """Mean grade points over every grade row for the course, or ``None`` if it has none."""

    _ensure_course(session, course_id)
    return _average(session, Grade.course_id == course_id)


def calculate_gpa(session: Session, student_id: int) -> Optional[float]:
    """Mean grade points over every grade row for the student, or ``None`` if they have none."""

    _ensure_student(session, student_id)
    return _average(session, Grade.student_id == student_id)


def completed_credits(session: Session, student_id: int) -> Optional[int]:
    """Sum credit hours of courses the student passed.

    Returns ``None`` when the student has no grade rows at all, so that callers
    can tell "nothing recorded yet" apart from "nothing passed".
    """

    _ensure_student(session, student_id)

    row_count = session.execute(
        select(func.count(Grade.grade_id)).where(Grade.student_id == student_id)
    ).scalar_one()
    if row_count == 0:
        return None

    stmt = (
        select(func.coalesce(func.sum(Course.credit_hours), 0))
        .join(Grade, Grade.course_id == Course.course_id)
        .where(
            Grade.student_id == student_id,
            Grade.grade.in_(sorted(PASSING_GRADES)),
        )
    )
    return int(session.execute(stmt).scalar_one())
