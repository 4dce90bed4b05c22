"""Grade endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import GradeRead, GradeWrite
from ...services import grade_service
from ...services.errors import RecordsError
from .deps import get_role, to_http_error

router = APIRouter(prefix="/grades", tags=["grades"])


@router.put(
    "",
    response_model=GradeRead,
    summary="Record or correct a grade",
    responses={
        400: {"description": "Grade is not one of A, B, C, D, F"},
        403: {"description": "Role may not write grades"},
        404: {"description": "Student or course not found"},
    },
)
def put_grade(
    payload: GradeWrite,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> GradeRead:
    """Insert or update a grade.

    Example request body::

        {
            "student_id": 1,
            "course_id": 10,
            "grade": "A"
        }
    """

    try:
        grade = grade_service.insert_or_update_grade(
            db,
            student_id=payload.student_id,
            course_id=payload.course_id,
            grade=payload.grade,
            role=role,
        )
        db.commit()
        db.refresh(grade)
        return grade
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc


@router.delete(
    "/{student_id}/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a grade",
)
def delete_grade(
    student_id: int,
    course_id: int,
    db: Session = Depends(get_db),
    role: str = Depends(get_role),
) -> Response:
    try:
        grade_service.delete_grade(db, student_id=student_id, course_id=course_id, role=role)
        db.commit()
    except RecordsError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
