"""Domain logic for student admission, updates and soft deletion."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import AuditAction, EnrollmentStatus, Student
from ..utils.datetime import utcnow
from . import access_policy
from .access_policy import Operation, Table
from .audit_service import record_student_audit
from .errors import Conflict, NotFound, RuleCode, RuleViolation
from .validation import validate_enrollment_status, validate_student_name

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "enrollment_status"})


def _locked_student(session: Session, student_id: int) -> Student:
    stmt = (
        select(Student)
        .where(Student.student_id == student_id, Student.deleted_at.is_(None))
        .with_for_update()
    )
    student = session.execute(stmt).scalar_one_or_none()
    if student is None:
        raise NotFound("Student", student_id)
    return student


def get_student(session: Session, student_id: int) -> Student:
    student = session.get(Student, student_id)
    if student is None or student.deleted_at is not None:
        raise NotFound("Student", student_id)
    return student


def insert_student(
    session: Session,
    *,
    student_id: int,
    name: str,
    role: str,
    enrollment_status: str = EnrollmentStatus.ACTIVE.value,
) -> Student:
    """Admit a student after checking the name and the status whitelist."""

    access_policy.require(role, Table.STUDENTS, Operation.INSERT)
    name = validate_student_name(name)
    status = validate_enrollment_status(enrollment_status)
    # Deleted students keep their row, so their ids stay taken.
    if session.get(Student, student_id) is not None:
        raise Conflict("Student", student_id)

    student = Student(student_id=student_id, name=name, enrollment_status=status)
    session.add(student)
    session.flush()
    session.refresh(student)
    return student


def update_student(
    session: Session,
    *,
    student_id: int,
    changes: Mapping[str, Any],
    role: str,
) -> Student:
    """Apply field changes to a student and append one UPDATE audit entry."""

    access_policy.require(role, Table.STUDENTS, Operation.UPDATE)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise RuleViolation(RuleCode.UNKNOWN_STUDENT_FIELD, context=", ".join(sorted(unknown)))
    values = dict(changes)
    if "name" in values:
        values["name"] = validate_student_name(values["name"])
    if "enrollment_status" in values:
        values["enrollment_status"] = validate_enrollment_status(values["enrollment_status"])

    student = _locked_student(session, student_id)

    record_student_audit(
        session,
        action=AuditAction.UPDATE,
        student_id=student.student_id,
        actor_role=role,
        changes={field: [getattr(student, field), value] for field, value in values.items()},
    )
    for field, value in values.items():
        setattr(student, field, value)
    student.updated_at = utcnow()
    session.flush()
    return student


def delete_student(session: Session, *, student_id: int, role: str) -> Student:
    """Mark a student deleted and append one DELETE audit entry.

    The row, its enrollments and its grades are kept, so course averages and
    grade history do not change. Deleted students are hidden from lookups,
    reports and the graduation sweep.
    """

    access_policy.require(role, Table.STUDENTS, Operation.DELETE)

    student = _locked_student(session, student_id)
    snapshot = {"name": student.name, "enrollment_status": student.enrollment_status}

    record_student_audit(
        session,
        action=AuditAction.DELETE,
        student_id=student.student_id,
        actor_role=role,
        changes=snapshot,
    )

    now = utcnow()
    student.deleted_at = now
    student.updated_at = now
    session.flush()
    logger.info("student %s deleted by role %s", student_id, role)
    return student
