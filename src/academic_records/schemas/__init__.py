"""Public schema exports."""

from .course import (
	CascadeResult,
	CourseAverage,
	CourseCreate,
	CourseRead,
	CourseRename,
	CourseReschedule,
	EnrollmentCreate,
	EnrollmentRead,
)
from .grade import GradeRead, GradeWrite
from .report import AtRiskStudent, AuditEntryRead, EnrolledStudent
from .student import ActivityRead, StudentCreate, StudentMetric, StudentRead, StudentUpdate

__all__ = [
	"ActivityRead",
	"AtRiskStudent",
	"AuditEntryRead",
	"CascadeResult",
	"CourseAverage",
	"CourseCreate",
	"CourseRead",
	"CourseRename",
	"CourseReschedule",
	"EnrolledStudent",
	"EnrollmentCreate",
	"EnrollmentRead",
	"GradeRead",
	"GradeWrite",
	"StudentCreate",
	"StudentMetric",
	"StudentRead",
	"StudentUpdate",
]
