"""Exceptions raised by the records service layer."""

from __future__ import annotations

import enum
from typing import Optional


class RuleCode(enum.IntEnum):
    """Stable application error codes carried by ``RuleViolation``."""

    INVALID_ENROLLMENT_STATUS = 20001
    INVALID_GRADE = 20002
    DUPLICATE_ENROLLMENT = 20003
    UNKNOWN_STUDENT_FIELD = 20004
    INVALID_CREDIT_HOURS = 20005
    INVALID_STUDENT_NAME = 20006


RULE_MESSAGES = {
    RuleCode.INVALID_ENROLLMENT_STATUS: "Invalid enrollment status",
    RuleCode.INVALID_GRADE: "Invalid grade",
    RuleCode.DUPLICATE_ENROLLMENT: "Duplicate enrollment",
    RuleCode.UNKNOWN_STUDENT_FIELD: "Unknown student field",
    RuleCode.INVALID_CREDIT_HOURS: "Invalid credit hours",
    RuleCode.INVALID_STUDENT_NAME: "Invalid student name",
}


class RecordsError(Exception):
    """Base class for errors surfaced to callers of the service layer."""

    status_code = 400

    def __init__(self, detail: str, status_code: Optional[int] = None, code: Optional[str] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        self.code = code

    def to_payload(self) -> dict:
        return {"code": self.code, "message": self.detail}


class RuleViolation(RecordsError):
    """Raised when input fails a whitelist or domain rule. The write is rejected."""

    def __init__(self, rule: RuleCode, context: Optional[str] = None) -> None:
        message = RULE_MESSAGES[rule]
        super().__init__(message, status_code=400, code=str(rule.value))
        self.rule = rule
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            return f"{self.message}: {self.context}"
        return self.message


class AccessDenied(RecordsError):
    """Raised when a role may not perform an operation on a table."""

    def __init__(self, role: str, table: str, operation: str) -> None:
        super().__init__(
            f"Role '{role}' may not {operation} on {table}",
            status_code=403,
            code="ACCESS_DENIED",
        )
        self.role = role
        self.table = table
        self.operation = operation


class NotFound(RecordsError):
    """Raised when a referenced student or course does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} {identifier} not found", status_code=404, code="NOT_FOUND")
        self.entity = entity
        self.identifier = identifier


class Conflict(RecordsError):
    """Raised when a new row would reuse an existing primary key."""

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} {identifier} already exists", status_code=409, code="CONFLICT")
        self.entity = entity
        self.identifier = identifier
