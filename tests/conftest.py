"""Pytest configuration and shared fixtures.

The app is pointed at an in-memory SQLite database before it is imported,
so every test gets a fresh schema without a PostgreSQL server.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="registration-logs-"))

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine, get_db
from app.main import app
from app.models.academic_department import AcademicDepartment
from app.models.academic_semester import AcademicSemester
from app.models.building import Building, Room
from app.models.course import Course, CourseToPrerequisite
from app.models.enums import SemesterRegistrationStatus, WeekDay
from app.models.offered_course import OfferedCourse, OfferedCourseSection, OfferedCourseClassSchedule
from app.models.semester_registration import SemesterRegistration
from app.models.student import Student
from app.models.student_semester_registration import StudentSemesterRegistration
from app.utils.auth import get_current_user


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# =============================================================================
# Sample data
# =============================================================================


def build_world(db, status=SemesterRegistrationStatus.ONGOING, min_credit=3, max_credit=12):
    """Seed one department, two semesters, a registration and its offered courses.

    - ``previous_semester`` is current, ``semester`` belongs to the registration.
    - ``intro`` (3 credits), ``algebra`` (3), ``project`` (6), and
      ``advanced`` (3, requires ``intro``) are offered with one section each.
    - ``student`` and ``other_student`` are in the department.
    """
    dept = AcademicDepartment(title="Computer Science")
    previous_semester = AcademicSemester(
        year=2025, title="Autumn", code="01", start_month="January", end_month="April", is_current=True,
    )
    semester = AcademicSemester(
        year=2025, title="Summer", code="02", start_month="May", end_month="August", is_current=False,
    )
    db.add_all([dept, previous_semester, semester])
    db.flush()

    now = datetime.now(timezone.utc)
    registration = SemesterRegistration(
        start_date=now,
        end_date=now + timedelta(days=14),
        status=status,
        min_credit=min_credit,
        max_credit=max_credit,
        academic_semester_id=semester.id,
    )
    building = Building(title="Engineering Hall")
    db.add_all([registration, building])
    db.flush()

    room = Room(room_number="301", floor="3", building_id=building.id)
    intro = Course(title="Intro to Programming", code="CS101", credits=3)
    algebra = Course(title="Linear Algebra", code="MA201", credits=3)
    project = Course(title="Capstone Project", code="CS490", credits=6)
    advanced = Course(title="Data Structures", code="CS201", credits=3)
    db.add_all([room, intro, algebra, project, advanced])
    db.flush()
    db.add(CourseToPrerequisite(course_id=advanced.id, prerequisite_id=intro.id))

    offered = {}
    sections = {}
    for key, course in (("intro", intro), ("algebra", algebra), ("project", project), ("advanced", advanced)):
        oc = OfferedCourse(
            course_id=course.id,
            academic_department_id=dept.id,
            semester_registration_id=registration.id,
        )
        db.add(oc)
        db.flush()
        section = OfferedCourseSection(
            title="A",
            max_capacity=30,
            currently_enrolled_student=0,
            offered_course_id=oc.id,
            semester_registration_id=registration.id,
        )
        db.add(section)
        db.flush()
        db.add(OfferedCourseClassSchedule(
            start_time="09:00",
            end_time="10:30",
            day_of_week=WeekDay.MONDAY,
            offered_course_section_id=section.id,
            semester_registration_id=registration.id,
            room_id=room.id,
        ))
        offered[key] = oc
        sections[key] = section

    student = Student(student_id="S-1001", first_name="Ada", last_name="Lovelace",
                      academic_department_id=dept.id)
    other_student = Student(student_id="S-1002", first_name="Alan", last_name="Turing",
                            academic_department_id=dept.id)
    db.add_all([student, other_student])
    db.commit()

    return SimpleNamespace(
        dept=dept,
        previous_semester=previous_semester,
        semester=semester,
        registration=registration,
        courses=SimpleNamespace(intro=intro, algebra=algebra, project=project, advanced=advanced),
        offered=SimpleNamespace(**offered),
        sections=SimpleNamespace(**sections),
        student=student,
        other_student=other_student,
    )


def start_student_registration(db, world, student=None):
    student = student or world.student
    row = StudentSemesterRegistration(student_id=student.id, semester_registration_id=world.registration.id)
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def world(db):
    return build_world(db)


# =============================================================================
# HTTP client
# =============================================================================


@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Make the given username/role the authenticated user."""
    def _login(username, role="student"):
        user = SimpleNamespace(id=1, username=username, role=role)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login
