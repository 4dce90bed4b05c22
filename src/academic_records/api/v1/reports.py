"""Read-only reporting endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import AtRiskStudent, AuditEntryRead, EnrolledStudent
from ...services import audit_service, reporting_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/enrollments", response_model=List[EnrolledStudent], summary="Students enrolled in a term")
def enrolled_students(
    term: str = Query(..., description="Term label, e.g. 'Fall 2026'"),
    db: Session = Depends(get_db),
) -> List[EnrolledStudent]:
    return [
        EnrolledStudent(student_id=student_id, name=name)
        for student_id, name in reporting_service.students_enrolled_in_term(db, term)
    ]


@router.get("/at-risk", response_model=List[AtRiskStudent], summary="Active students below the GPA threshold")
def at_risk(
    gpa_below: Optional[float] = Query(None, ge=0, le=4, description="Overrides the configured threshold"),
    db: Session = Depends(get_db),
) -> List[AtRiskStudent]:
    return [
        AtRiskStudent(student_id=student_id, name=name, gpa=gpa)
        for student_id, name, gpa in reporting_service.at_risk_students(db, gpa_threshold=gpa_below)
    ]


@router.get("/grade-changes", response_model=List[str], summary="Narrative of recent grade changes")
def grade_changes(
    limit: Optional[int] = Query(None, ge=1, le=500, description="Number of recent changes to replay"),
    db: Session = Depends(get_db),
) -> List[str]:
    return list(reporting_service.audit_narrative_for_recent_grade_changes(db, limit=limit))


@router.get("/audit", response_model=List[AuditEntryRead], summary="Student audit trail")
def audit_trail(
    *,
    student_id: Optional[int] = Query(None, description="Filter by audited student id"),
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    db: Session = Depends(get_db),
) -> List[AuditEntryRead]:
    entries = audit_service.list_audit_entries(db, subject_id=student_id, limit=limit, offset=offset)
    return list(entries)
