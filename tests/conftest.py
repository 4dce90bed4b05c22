"""Shared fixtures: an in-memory SQLite database rebuilt for every test."""

import os

# Must be set before the package creates its engine.
os.environ["RECORDS_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient

from academic_records import models  # noqa: F401  (registers tables on Base)
from academic_records.core.database import Base, SessionLocal, engine, get_db
from academic_records.services import course_service, student_service

ADMIN = "admin"


@pytest.fixture
def session():
    Base.metadata.create_all(engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def admit(session):
    """Insert an Active student (or the given status) as an admin."""

    def _admit(student_id, name="Ada Okafor", status="Active"):
        return student_service.insert_student(
            session,
            student_id=student_id,
            name=name,
            enrollment_status=status,
            role=ADMIN,
        )

    return _admit


@pytest.fixture
def add_course(session):
    def _add_course(course_id, title="Algebra", credit_hours=3, offering_term="Fall 2026", is_mandatory=True):
        return course_service.create_course(
            session,
            course_id=course_id,
            title=title,
            credit_hours=credit_hours,
            offering_term=offering_term,
            is_mandatory=is_mandatory,
            role=ADMIN,
        )

    return _add_course


@pytest.fixture
def client(session):
    from academic_records.main import app

    def _override_get_db():
        yield session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
