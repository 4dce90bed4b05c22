"""Course catalog and enrollment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import (
    CascadeResult,
    CourseAverage,
    CourseCreate,
    CourseRead,
    CourseRename,
    CourseReschedule,
    EnrollmentCreate,
    EnrollmentRead,
)
from ...services import course_service, metrics_service
from ...services.errors import RecordsError
from .deps import get_role, to_http_error

router = APIRouter(prefix="/courses", tags=["courses"])


@router.post(
    "",
    response_model=CourseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a course to the catalog",
    responses={
        400: {"description": "Invalid credit hours"},
        403: {"description": "Role may not insert courses"},
        409: {"description": "Course id already exists"},
    },
)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> CourseRead:
    try:
        course = course_service.create_course(
            db,
            course_id=payload.course_id,
            title=payload.title,
            credit_hours=payload.credit_hours,
            offering_term=payload.offering_term,
            is_mandatory=payload.is_mandatory,
            role=role,
        )
        db.commit()
        db.refresh(course)
        return course
    except (RecordsError, IntegrityError) as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.patch(
    "/{course_id}/title",
    response_model=CascadeResult,
    summary="Rename a course",
    responses={
        200: {
            "description": "Course renamed and enrollment terms re-synced",
            "content": {
                "application/json": {
                    "example": {
                        "course": {
                            "course_id": 10,
                            "title": "Algebra I",
                            "credit_hours": 3,
                            "offering_term": "Fall 2026",
                            "is_mandatory": True,
                        },
                        "enrollments_updated": 3,
                    }
                }
            },
        },
        403: {"description": "Role may not update courses"},
        404: {"description": "Course not found"},
    },
)
def rename_course(
    course_id: int,
    payload: CourseRename,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> CascadeResult:
    """Rename the course; every enrollment of it is re-synced in the same transaction."""

    try:
        affected = course_service.rename_course(db, course_id=course_id, new_title=payload.title, role=role)
        db.commit()
        course = course_service.get_course(db, course_id)
        return CascadeResult(course=CourseRead.model_validate(course), enrollments_updated=affected)
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.patch(
    "/{course_id}/term",
    response_model=CascadeResult,
    summary="Move a course to another offering term",
)
def reschedule_course(
    course_id: int,
    payload: CourseReschedule,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> CascadeResult:
    try:
        affected = course_service.reschedule_course(
            db,
            course_id=course_id,
            offering_term=payload.offering_term,
            role=role,
        )
        db.commit()
        course = course_service.get_course(db, course_id)
        return CascadeResult(course=CourseRead.model_validate(course), enrollments_updated=affected)
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.post(
    "/{course_id}/enrollments",
    response_model=EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll a student in the current offering",
    responses={
        400: {"description": "Student already enrolled for this term"},
        404: {"description": "Student or course not found"},
    },
)
def enroll_student(
    course_id: int,
    payload: EnrollmentCreate,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> EnrollmentRead:
    try:
        enrollment = course_service.enroll_student(
            db,
            student_id=payload.student_id,
            course_id=course_id,
            role=role,
        )
        db.commit()
        db.refresh(enrollment)
        return enrollment
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.get("/{course_id}/average-grade", response_model=CourseAverage, summary="Average course grade")
def get_average_grade(course_id: int, db: Session = Depends(get_db)) -> CourseAverage:
    """Return the mean grade points, or null when no grades are recorded."""

    try:
        return CourseAverage(
            course_id=course_id,
            average_grade=metrics_service.calculate_average_grade(db, course_id),
        )
    except RecordsError as exc:
        raise to_http_error(exc) from exc
