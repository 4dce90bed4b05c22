"""Append-only audit and activity logs."""

import enum

from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String

from ..core.database import Base
from ..utils.datetime import utcnow


class AuditAction(str, enum.Enum):
    """Mutating actions recorded in the audit log."""

    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditLog(Base):
    """Immutable record of an UPDATE or DELETE against an audited table.

    ``subject_id`` is not a foreign key: entries outlive
    the rows they describe.
    """

    __tablename__ = "audit_log"

    audit_id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(Enum(AuditAction, name="audit_action"), nullable=False)
    table_name = Column(String, nullable=False)
    subject_id = Column(Integer, nullable=False, index=True)
    actor_role = Column(String, nullable=False)
    changes = Column(JSON)
    logged_at = Column(DateTime, default=utcnow, nullable=False)


class ActivityLog(Base):
    """Explicitly logged student activity such as record access."""

    __tablename__ = "activity_log"

    activity_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, nullable=False, index=True)
    description = Column(String, nullable=False)
    logged_at = Column(DateTime, default=utcnow, nullable=False)
