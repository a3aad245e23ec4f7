"""Tests for the available-course resolver."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from app.models.enums import SemesterRegistrationStatus, StudentEnrolledCourseStatus, WeekDay
from app.models.student_enrolled_course import StudentEnrolledCourse
from app.services.available_courses import get_available_courses
from app.services.enrollment import enroll_into_course
from app.services.semester_registration import get_my_semester_reg_courses

from conftest import start_student_registration


def _offered(oc_id, course_id, prerequisite_ids=(), sections=None):
    course = SimpleNamespace(
        id=course_id,
        title=f"Course {course_id}",
        code=f"C{course_id}",
        credits=3,
        prerequisites=[SimpleNamespace(prerequisite_id=p) for p in prerequisite_ids],
    )
    return SimpleNamespace(id=oc_id, course=course, sections=sections or [])


def _section(section_id, max_capacity=10, enrolled=0, schedules=()):
    return SimpleNamespace(
        id=section_id,
        title=f"S{section_id}",
        max_capacity=max_capacity,
        currently_enrolled_student=enrolled,
        class_schedules=list(schedules),
    )


def _taken(offered_course_id, section_id):
    return SimpleNamespace(offered_course_id=offered_course_id, offered_course_section_id=section_id)


class TestGetAvailableCourses:
    """Tests for get_available_courses."""

    def test_completed_courses_are_excluded(self):
        offered = [_offered(1, 100), _offered(2, 200)]

        result = get_available_courses(offered, [100], [])

        assert [c["id"] for c in result] == [2]

    def test_unmet_prerequisites_are_excluded(self):
        offered = [_offered(1, 300, prerequisite_ids=[100, 200])]

        assert get_available_courses(offered, [100], []) == []
        assert [c["id"] for c in get_available_courses(offered, [100, 200], [])] == [1]

    def test_taken_section_is_flagged(self):
        offered = [_offered(1, 100, sections=[_section(11), _section(12)]), _offered(2, 200)]

        result = get_available_courses(offered, [], [_taken(1, 12)])

        first, second = result
        assert first["is_taken"] is True
        assert [s["is_taken"] for s in first["sections"]] == [False, True]
        assert second["is_taken"] is False

    def test_section_seats_and_schedule_are_denormalized(self):
        building = SimpleNamespace(title="Science Block")
        room = SimpleNamespace(room_number="204", floor="2", building=building)
        schedule = SimpleNamespace(
            id=7, day_of_week=WeekDay.TUESDAY, start_time="13:00", end_time="14:30", room=room,
        )
        offered = [_offered(1, 100, sections=[_section(11, max_capacity=40, enrolled=38, schedules=[schedule]),
                                              _section(12, max_capacity=None)])]

        sections = get_available_courses(offered, [], [])[0]["sections"]

        assert sections[0]["available_seats"] == 2
        assert sections[0]["class_schedules"] == [{
            "id": 7,
            "day_of_week": WeekDay.TUESDAY,
            "start_time": "13:00",
            "end_time": "14:30",
            "room_number": "204",
            "floor": "2",
            "building": "Science Block",
        }]
        assert sections[1]["available_seats"] is None


class TestMySemesterCourses:
    """Tests for get_my_semester_reg_courses against the database."""

    def test_lists_courses_for_the_student(self, db, world):
        db.add(StudentEnrolledCourse(
            student_id=world.student.id,
            course_id=world.courses.algebra.id,
            academic_semester_id=world.previous_semester.id,
            status=StudentEnrolledCourseStatus.COMPLETED,
        ))
        db.commit()
        start_student_registration(db, world)
        enroll_into_course(db, "S-1001", world.offered.project.id, world.sections.project.id)

        result = get_my_semester_reg_courses(db, "S-1001")

        by_code = {c["code"]: c for c in result}
        # algebra 已修畢, advanced 先修 intro 未修畢
        assert set(by_code) == {"CS101", "CS490"}
        assert by_code["CS490"]["is_taken"] is True
        assert by_code["CS490"]["sections"][0]["currently_enrolled_student"] == 1
        assert by_code["CS101"]["sections"][0]["class_schedules"][0]["building"] == "Engineering Hall"

    def test_no_open_registration_is_bad_request(self, db, world):
        world.registration.status = SemesterRegistrationStatus.ENDED
        db.commit()

        with pytest.raises(HTTPException) as exc:
            get_my_semester_reg_courses(db, "S-1001")
        assert exc.value.status_code == 400
