"""Student endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import ActivityRead, StudentCreate, StudentMetric, StudentRead, StudentUpdate
from ...services import audit_service, metrics_service, student_service
from ...services.errors import RecordsError
from .deps import get_role, to_http_error

router = APIRouter(prefix="/students", tags=["students"])


@router.post(
    "",
    response_model=StudentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Admit a student",
    responses={
        201: {
            "description": "Student created",
            "content": {
                "application/json": {
                    "example": {
                        "student_id": 1,
                        "name": "Ada Okafor",
                        "enrollment_status": "Active",
                        "created_at": "2026-09-01T09:00:00",
                        "updated_at": "2026-09-01T09:00:00",
                    }
                }
            },
        },
        400: {"description": "Invalid enrollment status"},
        403: {"description": "Role may not insert students"},
        409: {"description": "Student id already exists"},
    },
)
def create_student(
    payload: StudentCreate,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> StudentRead:
    """Insert a student after validating the enrollment status.

    Example request body::

        {
            "student_id": 1,
            "name": "Ada Okafor",
            "enrollment_status": "Active"
        }
    """

    try:
        student = student_service.insert_student(
            db,
            student_id=payload.student_id,
            name=payload.name,
            enrollment_status=payload.enrollment_status,
            role=role,
        )
        db.commit()
        db.refresh(student)
        return student
    except (RecordsError, IntegrityError) as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.patch(
    "/{student_id}",
    response_model=StudentRead,
    summary="Update a student",
    responses={
        400: {"description": "Invalid name, enrollment status or unknown field"},
        403: {"description": "Role may not update students"},
        404: {"description": "Student not found"},
    },
)
def update_student(
    student_id: int,
    payload: StudentUpdate,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> StudentRead:
    """Change name and/or enrollment status; writes one audit entry."""

    try:
        student = student_service.update_student(
            db,
            student_id=student_id,
            changes=payload.model_dump(exclude_unset=True),
            role=role,
        )
        db.commit()
        db.refresh(student)
        return student
    except (RecordsError, IntegrityError) as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a student",
    responses={
        403: {"description": "Role may not delete students"},
        404: {"description": "Student not found"},
    },
)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> Response:
    try:
        student_service.delete_student(db, student_id=student_id, role=role)
        db.commit()
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{student_id}", response_model=StudentRead, summary="Fetch a student")
def get_student(student_id: int, db: Session = Depends(get_db)) -> StudentRead:
    try:
        return student_service.get_student(db, student_id)
    except RecordsError as exc:
        raise to_http_error(exc) from exc


@router.get("/{student_id}/gpa", response_model=StudentMetric, summary="Student GPA")
def get_gpa(student_id: int, db: Session = Depends(get_db)) -> StudentMetric:
    """Return the GPA, or a null value when the student has no grade rows."""

    try:
        return StudentMetric(student_id=student_id, value=metrics_service.calculate_gpa(db, student_id))
    except RecordsError as exc:
        raise to_http_error(exc) from exc


@router.get(
    "/{student_id}/completed-credits",
    response_model=StudentMetric,
    summary="Completed credit hours",
)
def get_completed_credits(student_id: int, db: Session = Depends(get_db)) -> StudentMetric:
    try:
        return StudentMetric(
            student_id=student_id,
            value=metrics_service.completed_credits(db, student_id),
        )
    except RecordsError as exc:
        raise to_http_error(exc) from exc


@router.post(
    "/{student_id}/activity",
    response_model=ActivityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Log that a student accessed their records",
)
def log_activity(
    student_id: int,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> ActivityRead:
    try:
        entry = audit_service.log_student_activity(db, student_id, role=role)
        db.commit()
        db.refresh(entry)
        return entry
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
