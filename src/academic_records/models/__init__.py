"""SQLAlchemy models for the academic records schema."""

from .audit_log import ActivityLog, AuditAction, AuditLog
from .course import Course
from .enrollment import Enrollment
from .grade import ChangeOperation, Grade, GradeChangeLog, GradeLetter
from .student import EnrollmentStatus, Student

__all__ = [
    "ActivityLog",
    "AuditAction",
    "AuditLog",
    "ChangeOperation",
    "Course",
    "Enrollment",
    "EnrollmentStatus",
    "Grade",
    "GradeChangeLog",
    "GradeLetter",
    "Student",
]
