"""Pydantic schemas for course and enrollment endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    course_id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1)
    credit_hours: int = Field(3, gt=0)
    offering_term: Optional[str] = Field(None, description="Defaults to the current term.")
    is_mandatory: bool = True


class CourseRead(BaseModel):
    course_id: int
    title: str
    credit_hours: int
    offering_term: str
    is_mandatory: bool

    class Config:
        from_attributes = True


class CourseRename(BaseModel):
    title: str = Field(..., min_length=1)


class CourseReschedule(BaseModel):
    offering_term: str = Field(..., min_length=1)


class CascadeResult(BaseModel):
    """Outcome of a course change that cascaded to enrollments."""

    course: CourseRead
    enrollments_updated: int = Field(..., ge=0)


class EnrollmentCreate(BaseModel):
    student_id: int


class EnrollmentRead(BaseModel):
    enrollment_id: int
    student_id: int
    course_id: int
    term: str
    enrolled_at: datetime

    class Config:
        from_attributes = True


class CourseAverage(BaseModel):
    course_id: int
    average_grade: Optional[float]
