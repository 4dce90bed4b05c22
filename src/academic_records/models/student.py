"""Student domain model."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class EnrollmentStatus(str, enum.Enum):
    """Permitted values of ``Student.enrollment_status``."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    GRADUATED = "Graduated"


class Student(Base):
    """Represents an admitted student.

    Rows are never removed; deletion stamps ``deleted_at`` and keeps the
    student's enrollments and grades.
    """

    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint(
            "enrollment_status IN ('Active', 'Inactive', 'Graduated')",
            name="students_enrollment_status_check",
        ),
    )

    student_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    enrollment_status = Column(String, nullable=False, default=EnrollmentStatus.ACTIVE.value)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    enrollments = relationship("Enrollment", back_populates="student")
    grades = relationship("Grade", back_populates="student")
