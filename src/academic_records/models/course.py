"""Course catalog model."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Course(Base):
    """A catalog course and the term in which it is currently offered."""

    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("credit_hours > 0", name="courses_credit_hours_positive"),
    )

    course_id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String, nullable=False)
    credit_hours = Column(Integer, nullable=False, default=3)
    offering_term = Column(String, nullable=False)
    is_mandatory = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    enrollments = relationship("Enrollment", back_populates="course")
    grades = relationship("Grade", back_populates="course")
