"""Shared request dependencies and error translation."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, status
from sqlalchemy.exc import IntegrityError

from ...core.config import get_settings
from ...services.errors import RecordsError


def get_role(x_role: Optional[str] = Header(None, alias="X-Role")) -> str:
    """Caller role taken from the ``X-Role`` header."""

    return x_role or get_settings().default_role


def to_http_error(exc: RecordsError | IntegrityError) -> HTTPException:
    """Build the HTTP error for a domain error or a database constraint failure."""

    if isinstance(exc, IntegrityError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "CONFLICT", "message": "Record conflicts with existing data."},
        )
    return HTTPException(status_code=exc.status_code, detail=exc.to_payload())
