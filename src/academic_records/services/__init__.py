"""Service layer exports."""

from . import (
	access_policy,
	audit_service,
	change_capture,
	course_service,
	grade_service,
	metrics_service,
	reporting_service,
	student_service,
	validation,
	workflow_service,
)

__all__ = [
	"access_policy",
	"audit_service",
	"change_capture",
	"course_service",
	"grade_service",
	"metrics_service",
	"reporting_service",
	"student_service",
	"validation",
	"workflow_service",
]
