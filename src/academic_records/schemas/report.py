"""Report response schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from ..models import AuditAction


class EnrolledStudent(BaseModel):
    student_id: int
    name: str


class AtRiskStudent(BaseModel):
    student_id: int
    name: str
    gpa: float


class AuditEntryRead(BaseModel):
    audit_id: int
    action: AuditAction
    table_name: str
    subject_id: int
    actor_role: str
    changes: Optional[Any]
    logged_at: datetime

    class Config:
        from_attributes = True
