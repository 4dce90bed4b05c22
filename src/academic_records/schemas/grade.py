"""Pydantic schemas for grade endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class GradeWrite(BaseModel):
    """Insert or correct a grade. A null grade records the course as ungraded."""

    student_id: int
    course_id: int
    grade: Optional[str] = None


class GradeRead(BaseModel):
    grade_id: int
    student_id: int
    course_id: int
    grade: Optional[str]
    updated_at: datetime

    class Config:
        from_attributes = True
