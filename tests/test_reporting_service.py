import pytest

from academic_records.services import course_service, grade_service, reporting_service, student_service
from academic_records.services.grade_service import GradeEntry


@pytest.fixture
def fall_roster(session, admit, add_course):
    admit(1, name="Ada")
    admit(2, name="Ben")
    admit(3, name="Cy")
    add_course(10, offering_term="Fall 2026")
    add_course(11, title="Biology", offering_term="Fall 2026")
    add_course(12, title="Chemistry", offering_term="Spring 2027")
    for student_id, course_id in [(2, 10), (1, 10), (1, 11), (3, 12)]:
        course_service.enroll_student(session, student_id=student_id, course_id=course_id, role="admin")


def test_students_enrolled_in_term_are_distinct_and_ordered(session, fall_roster):
    assert list(reporting_service.students_enrolled_in_term(session, "Fall 2026")) == [(1, "Ada"), (2, "Ben")]
    assert list(reporting_service.students_enrolled_in_term(session, "Winter 1999")) == []


def test_traversal_can_be_interrupted_and_restarted(session, fall_roster):
    traversal = reporting_service.students_enrolled_in_term(session, "Fall 2026")
    assert next(traversal) == (1, "Ada")
    traversal.close()

    assert list(reporting_service.students_enrolled_in_term(session, "Fall 2026")) == [(1, "Ada"), (2, "Ben")]


def test_at_risk_students_only_lists_active_low_gpa(session, fall_roster):
    grade_service.record_grades(
        session,
        [
            GradeEntry(1, 10, "A"),
            GradeEntry(1, 11, "B"),
            GradeEntry(2, 10, "D"),
            GradeEntry(2, 11, "F"),
            GradeEntry(3, 12, "F"),
        ],
        role="admin",
    )
    student_service.update_student(session, student_id=3, changes={"enrollment_status": "Inactive"}, role="admin")

    assert list(reporting_service.at_risk_students(session)) == [(2, "Ben", 0.5)]
    assert [row[0] for row in reporting_service.at_risk_students(session, gpa_threshold=4)] == [1, 2]


def test_grade_change_narrative_replays_in_capture_order(session, fall_roster):
    grade_service.record_grades(session, [GradeEntry(1, 10, "A"), GradeEntry(1, 11, "B")], role="admin")
    grade_service.insert_or_update_grade(session, student_id=1, course_id=10, grade="C", role="admin")
    grade_service.delete_grade(session, student_id=1, course_id=11, role="admin")
    grade_service.insert_or_update_grade(session, student_id=2, course_id=10, grade=None, role="admin")

    assert list(reporting_service.audit_narrative_for_recent_grade_changes(session)) == [
        "Student 1 received grade A in course 10",
        "Student 1 received grade B in course 11",
        "Student 1 grade in course 10 changed from A to C",
        "Student 1 grade B in course 11 was removed",
        "Student 2 was recorded as ungraded in course 10",
    ]
    assert list(reporting_service.audit_narrative_for_recent_grade_changes(session, limit=2)) == [
        "Student 1 grade B in course 11 was removed",
        "Student 2 was recorded as ungraded in course 10",
    ]


def test_at_risk_gpa_counts_ungraded_rows_as_zero(session, fall_roster):
    grade_service.record_grades(
        session,
        [GradeEntry(1, 10, "B"), GradeEntry(1, 11, None), GradeEntry(2, 10, None)],
        role="admin",
    )

    assert list(reporting_service.at_risk_students(session)) == [(1, "Ada", 1.5), (2, "Ben", 0.0)]


def test_deleted_students_are_left_out_of_reports(session, fall_roster):
    grade_service.record_grades(session, [GradeEntry(1, 10, "F"), GradeEntry(2, 10, "F")], role="admin")

    student_service.delete_student(session, student_id=2, role="admin")

    assert list(reporting_service.students_enrolled_in_term(session, "Fall 2026")) == [(1, "Ada")]
    assert [row[0] for row in reporting_service.at_risk_students(session)] == [1]
