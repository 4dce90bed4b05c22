"""Append-only audit and activity logging."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import ActivityLog, AuditAction, AuditLog, Student
from ..utils.datetime import utcnow
from . import access_policy
from .access_policy import Operation, Table
from .errors import NotFound

STUDENT_ACCESS_DESCRIPTION = "Student accessed records"
SYSTEM_ROLE = "system"


def record_student_audit(
    session: Session,
    *,
    action: AuditAction,
    student_id: int,
    actor_role: str,
    changes: Optional[dict] = None,
) -> AuditLog:
    """Append one audit entry describing a student UPDATE or DELETE.

    ``student_id`` and ``changes`` must come from the row as it was before the
    mutation.
    """

    entry = AuditLog(
        action=action,
        table_name="students",
        subject_id=student_id,
        actor_role=actor_role,
        changes=changes,
        logged_at=utcnow(),
    )
    session.add(entry)
    return entry


def log_student_activity(
    session: Session,
    student_id: int,
    *,
    role: str,
    description: str = STUDENT_ACCESS_DESCRIPTION,
) -> ActivityLog:
    """Append an activity entry for a known, non-deleted student."""

    access_policy.require(role, Table.ACTIVITY_LOG, Operation.INSERT)

    student = session.get(Student, student_id)
    if student is None or student.deleted_at is not None:
        raise NotFound("Student", student_id)

    entry = ActivityLog(student_id=student_id, description=description, logged_at=utcnow())
    session.add(entry)
    session.flush()
    return entry


def list_audit_entries(
    session: Session,
    *,
    subject_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[AuditLog]:
    """Return audit entries, newest first."""

    stmt = select(AuditLog).order_by(AuditLog.audit_id.desc()).offset(offset).limit(limit)
    if subject_id is not None:
        stmt = stmt.where(AuditLog.subject_id == subject_id)
    return session.execute(stmt).scalars().all()


def list_activity(session: Session, student_id: int, *, limit: int = 50) -> Sequence[ActivityLog]:
    stmt = (
        select(ActivityLog)
        .where(ActivityLog.student_id == student_id)
        .order_by(ActivityLog.activity_id.desc())
        .limit(limit)
    )
    return session.execute(stmt).scalars().all()
