"""Grade model and grade change capture log."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class GradeLetter(str, enum.Enum):
    """Letter grades accepted by the grades table."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class ChangeOperation(str, enum.Enum):
    """Kind of write that produced a grade change record."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Grade(Base):
    """Result recorded for a student in a course. A NULL grade means ungraded."""

    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="grades_student_course_unique"),
        CheckConstraint("grade IS NULL OR grade IN ('A', 'B', 'C', 'D', 'F')", name="grades_letter_check"),
    )

    grade_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.student_id", ondelete="RESTRICT"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.course_id", ondelete="RESTRICT"), nullable=False, index=True)
    grade = Column(String(1))
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    student = relationship("Student", back_populates="grades")
    course = relationship("Course", back_populates="grades")


class GradeChangeLog(Base):
    """Append-only record of a single grade row change.

    ``change_id`` preserves capture order; rows written by one operation share
    a ``batch_id``.
    """

    __tablename__ = "grade_change_log"

    change_id = Column(Integer, primary_key=True, autoincrement=True)
    batch_id = Column(String(32), nullable=False, index=True)
    operation = Column(Enum(ChangeOperation, name="grade_change_operation"), nullable=False)
    student_id = Column(Integer, nullable=False)
    course_id = Column(Integer, nullable=False)
    old_grade = Column(String(1))
    new_grade = Column(String(1))
    captured_at = Column(DateTime, default=utcnow, nullable=False)
