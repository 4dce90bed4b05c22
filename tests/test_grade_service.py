import pytest
from sqlalchemy import func, select

from academic_records.models import ChangeOperation, Grade, GradeChangeLog
from academic_records.services import grade_service
from academic_records.services.change_capture import GradeChangeBuffer, grade_change_batch
from academic_records.services.errors import AccessDenied, NotFound, RuleViolation
from academic_records.services.grade_service import GradeEntry


def _changes(session):
    stmt = select(GradeChangeLog).order_by(GradeChangeLog.change_id)
    return session.execute(stmt).scalars().all()


@pytest.fixture
def roster(admit, add_course):
    admit(1)
    add_course(10)
    add_course(11, title="Biology")


def test_insert_then_update_captures_old_and_new_values(session, roster):
    grade_service.insert_or_update_grade(session, student_id=1, course_id=10, grade="A", role="instructor")
    grade = grade_service.insert_or_update_grade(
        session, student_id=1, course_id=10, grade="C", role="instructor"
    )

    assert grade.grade == "C"
    assert session.execute(select(func.count()).select_from(Grade)).scalar_one() == 1
    assert [(c.operation, c.old_grade, c.new_grade) for c in _changes(session)] == [
        (ChangeOperation.INSERT, None, "A"),
        (ChangeOperation.UPDATE, "A", "C"),
    ]


def test_batch_write_flushes_once_in_capture_order(session, roster):
    grade_service.record_grades(
        session,
        [GradeEntry(1, 11, "B"), GradeEntry(1, 10, "A")],
        role="admin",
    )

    changes = _changes(session)
    assert [(c.course_id, c.new_grade) for c in changes] == [(11, "B"), (10, "A")]
    assert len({c.batch_id for c in changes}) == 1


def test_batch_with_one_bad_letter_writes_nothing(session, roster):
    with pytest.raises(RuleViolation):
        grade_service.record_grades(
            session,
            [GradeEntry(1, 10, "A"), GradeEntry(1, 11, "E")],
            role="admin",
        )

    assert session.execute(select(func.count()).select_from(Grade)).scalar_one() == 0
    assert _changes(session) == []


def test_grade_for_unknown_course_is_not_found(session, roster):
    with pytest.raises(NotFound):
        grade_service.insert_or_update_grade(session, student_id=1, course_id=99, grade="A", role="admin")


def test_read_write_role_cannot_record_grades(session, roster):
    with pytest.raises(AccessDenied):
        grade_service.insert_or_update_grade(session, student_id=1, course_id=10, grade="A", role="read_write")


def test_delete_grade_captures_removed_value(session, roster):
    grade_service.insert_or_update_grade(session, student_id=1, course_id=10, grade="D", role="admin")

    grade_service.delete_grade(session, student_id=1, course_id=10, role="instructor")

    last = _changes(session)[-1]
    assert (last.operation, last.old_grade, last.new_grade) == (ChangeOperation.DELETE, "D", None)
    with pytest.raises(NotFound):
        grade_service.delete_grade(session, student_id=1, course_id=10, role="instructor")


def test_failed_operation_discards_buffered_changes(session):
    with pytest.raises(RuntimeError):
        with grade_change_batch(session) as buffer:
            buffer.capture(ChangeOperation.INSERT, student_id=1, course_id=10, old_grade=None, new_grade="A")
            raise RuntimeError("boom")

    assert _changes(session) == []


def test_buffer_cannot_be_reused_after_flush(session):
    buffer = GradeChangeBuffer()
    buffer.capture(ChangeOperation.INSERT, student_id=1, course_id=10, old_grade=None, new_grade="A")
    assert len(buffer) == 1

    rows = buffer.flush(session)

    assert len(rows) == 1 and len(buffer) == 0
    with pytest.raises(RuntimeError):
        buffer.capture(ChangeOperation.UPDATE, student_id=1, course_id=10, old_grade="A", new_grade="B")
