"""HTTP-level tests, including the end-to-end admission and grading scenario."""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from academic_records.api.v1.deps import to_http_error
from academic_records.models import AuditLog, Student
from academic_records.services.errors import NotFound

ADMIN = {"X-Role": "admin"}


def _audit_count(session):
    return session.execute(select(func.count()).select_from(AuditLog)).scalar_one()


def test_healthcheck(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_end_to_end_admission_update_and_gpa(client, session):
    rejected = client.post(
        "/api/v1/students",
        json={"student_id": 1, "name": "Ada Okafor", "enrollment_status": "Pending"},
    )
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == {"code": "20001", "message": "Invalid enrollment status"}
    assert session.get(Student, 1) is None

    created = client.post(
        "/api/v1/students",
        json={"student_id": 1, "name": "Ada Okafor", "enrollment_status": "Active"},
    )
    assert created.status_code == 201
    assert created.json()["enrollment_status"] == "Active"

    updated = client.patch("/api/v1/students/1", json={"enrollment_status": "Inactive"})
    assert updated.status_code == 200
    assert updated.json()["enrollment_status"] == "Inactive"
    assert _audit_count(session) == 1

    for course_id, title in [(10, "Algebra"), (11, "Biology")]:
        response = client.post("/api/v1/courses", json={"course_id": course_id, "title": title}, headers=ADMIN)
        assert response.status_code == 201
    for course_id, letter in [(10, "A"), (11, "B")]:
        response = client.put(
            "/api/v1/grades",
            json={"student_id": 1, "course_id": course_id, "grade": letter},
            headers=ADMIN,
        )
        assert response.status_code == 200

    gpa = client.get("/api/v1/students/1/gpa")
    assert gpa.json() == {"student_id": 1, "value": 3.5}


def test_bad_grade_letter_is_rejected(client, admit, add_course, session):
    admit(1)
    add_course(10)
    session.commit()

    response = client.put(
        "/api/v1/grades",
        json={"student_id": 1, "course_id": 10, "grade": "E"},
        headers=ADMIN,
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "20002"


def test_default_role_cannot_delete_students(client, admit, session):
    admit(1)
    session.commit()

    response = client.delete("/api/v1/students/1")

    assert response.status_code == 403
    assert session.get(Student, 1) is not None
    assert _audit_count(session) == 0


def test_admin_delete_writes_audit_entry(client, admit, session):
    admit(1)
    session.commit()

    response = client.delete("/api/v1/students/1", headers=ADMIN)

    assert response.status_code == 204
    audit = client.get("/api/v1/reports/audit", params={"student_id": 1}).json()
    assert [(row["action"], row["subject_id"]) for row in audit] == [("DELETE", 1)]
    assert client.get("/api/v1/students/1").status_code == 404
    assert session.get(Student, 1).deleted_at is not None


def test_duplicate_student_id_conflicts(client, admit, session):
    admit(1)
    session.commit()

    response = client.post("/api/v1/students", json={"student_id": 1, "name": "Twin"})

    assert response.status_code == 409


def test_gpa_is_null_when_no_grades(client, admit, session):
    admit(1)
    session.commit()

    assert client.get("/api/v1/students/1/gpa").json() == {"student_id": 1, "value": None}
    assert client.get("/api/v1/students/2/gpa").status_code == 404


def test_rename_course_reports_cascaded_enrollments(client, admit, add_course, session):
    add_course(10, title="Algebra", offering_term="Fall 2026")
    for student_id in (1, 2, 3):
        admit(student_id, name=f"Student {student_id}")
        response = client.post("/api/v1/courses/10/enrollments", json={"student_id": student_id})
        assert response.status_code == 201

    response = client.patch("/api/v1/courses/10/title", json={"title": "Algebra I"}, headers=ADMIN)

    assert response.status_code == 200
    body = response.json()
    assert body["course"]["title"] == "Algebra I"
    assert body["enrollments_updated"] == 3

    enrolled = client.get("/api/v1/reports/enrollments", params={"term": "Fall 2026"}).json()
    assert [row["student_id"] for row in enrolled] == [1, 2, 3]


def test_activity_and_grade_change_reports(client, admit, add_course, session):
    admit(1)
    add_course(10)
    session.commit()

    activity = client.post("/api/v1/students/1/activity")
    assert activity.status_code == 201
    assert activity.json()["description"] == "Student accessed records"
    assert client.post("/api/v1/students/9/activity").status_code == 404

    client.put("/api/v1/grades", json={"student_id": 1, "course_id": 10, "grade": "B"}, headers=ADMIN)
    client.put("/api/v1/grades", json={"student_id": 1, "course_id": 10, "grade": "A"}, headers=ADMIN)

    narrative = client.get("/api/v1/reports/grade-changes").json()
    assert narrative == [
        "Student 1 received grade B in course 10",
        "Student 1 grade in course 10 changed from B to A",
    ]
    assert client.get("/api/v1/students/1/completed-credits").json() == {"student_id": 1, "value": 3.0}


def test_patch_with_null_name_is_rejected(client, admit, session):
    admit(1)
    session.commit()

    response = client.patch("/api/v1/students/1", json={"name": None}, headers=ADMIN)

    assert response.status_code == 400
    assert response.json()["detail"] == {"code": "20006", "message": "Invalid student name"}
    assert client.get("/api/v1/students/1").json()["name"] == "Ada Okafor"
    assert _audit_count(session) == 0


def test_read_only_role_cannot_log_activity(client, admit, session):
    admit(1)
    session.commit()

    response = client.post("/api/v1/students/1/activity", headers={"X-Role": "read_only"})

    assert response.status_code == 403


def test_deleted_student_drops_out_of_enrollment_report(client, admit, add_course, session):
    add_course(10, offering_term="Fall 2026")
    for student_id in (1, 2):
        admit(student_id, name=f"Student {student_id}")
        client.post("/api/v1/courses/10/enrollments", json={"student_id": student_id})

    assert client.delete("/api/v1/students/2", headers=ADMIN).status_code == 204

    enrolled = client.get("/api/v1/reports/enrollments", params={"term": "Fall 2026"}).json()
    assert [row["student_id"] for row in enrolled] == [1]


def test_error_translation_covers_domain_and_constraint_errors():
    not_found = to_http_error(NotFound("Student", 9))
    assert not_found.status_code == 404
    assert not_found.detail == NotFound("Student", 9).to_payload()

    conflict = to_http_error(IntegrityError("INSERT INTO students", {}, Exception("UNIQUE constraint failed")))
    assert conflict.status_code == 409
    assert conflict.detail["code"] == "CONFLICT"
