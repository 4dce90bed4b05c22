"""Pydantic schemas for student endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StudentCreate(BaseModel):
    """Request body for admitting a student."""

    student_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    enrollment_status: str = Field("Active", description="One of Active, Inactive, Graduated.")


class StudentUpdate(BaseModel):
    """Partial update; only supplied fields are changed."""

    name: Optional[str] = Field(None, min_length=1)
    enrollment_status: Optional[str] = None


class StudentRead(BaseModel):
    student_id: int
    name: str
    enrollment_status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ActivityRead(BaseModel):
    activity_id: int
    student_id: int
    description: str
    logged_at: datetime

    class Config:
        from_attributes = True


class StudentMetric(BaseModel):
    """A derived value for one student; ``value`` is null when nothing is recorded."""

    student_id: int
    value: Optional[float]
