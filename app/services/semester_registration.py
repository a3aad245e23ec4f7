import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.academic_semester import AcademicSemester
from app.models.building import Room
from app.models.course import Course
from app.models.enums import (
    IN_FLIGHT_STATUSES,
    SemesterRegistrationStatus,
    StudentEnrolledCourseStatus,
)
from app.models.offered_course import OfferedCourse, OfferedCourseSection, OfferedCourseClassSchedule
from app.models.semester_registration import SemesterRegistration
from app.models.student import Student
from app.models.student_enrolled_course import StudentEnrolledCourse
from app.models.student_semester_registration import (
    StudentSemesterRegistration,
    StudentSemesterRegistrationCourse,
)
from app.services.available_courses import get_available_courses
from app.services.semester_finalization import finalize_semester_registration

logger = logging.getLogger("app.registration")

# 只能往前：UPCOMING -> ONGOING -> ENDED
ALLOWED_TRANSITIONS = {
    SemesterRegistrationStatus.UPCOMING: SemesterRegistrationStatus.ONGOING,
    SemesterRegistrationStatus.ONGOING: SemesterRegistrationStatus.ENDED,
}


def check_status_transition(current: SemesterRegistrationStatus, requested: SemesterRegistrationStatus):
    current = SemesterRegistrationStatus(current)
    requested = SemesterRegistrationStatus(requested)
    allowed = ALLOWED_TRANSITIONS.get(current)
    if allowed is None:
        raise HTTPException(
            status_code=400,
            detail=f"Can not move from {current.value} to {requested.value}: {current.value} is final",
        )
    if requested != allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Can only move from {current.value} to {allowed.value}, not to {requested.value}",
        )


def _as_utc(value: datetime) -> datetime:
    # SQLite 取回的時間沒有時區
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _find_in_flight(db: Session):
    return (
        db.query(SemesterRegistration)
        .filter(SemesterRegistration.status.in_(IN_FLIGHT_STATUSES))
        .first()
    )


def _find_ongoing(db: Session):
    return (
        db.query(SemesterRegistration)
        .options(joinedload(SemesterRegistration.academic_semester))
        .filter(SemesterRegistration.status == SemesterRegistrationStatus.ONGOING)
        .first()
    )


def create_registration(db: Session, data: dict):
    in_flight = _find_in_flight(db)
    if in_flight:
        raise HTTPException(
            status_code=409,
            detail=f"There is already an {SemesterRegistrationStatus(in_flight.status).value} registration",
        )

    if not db.query(AcademicSemester.id).filter(AcademicSemester.id == data["academic_semester_id"]).first():
        raise HTTPException(status_code=404, detail="Academic semester not found")

    existing = (
        db.query(SemesterRegistration.id)
        .filter(SemesterRegistration.academic_semester_id == data["academic_semester_id"])
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="This academic semester already has a semester registration")

    row = SemesterRegistration(**data, status=SemesterRegistrationStatus.UPCOMING)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # 同時建立時由 in_flight / academic_semester_id unique 擋下
        db.rollback()
        raise HTTPException(status_code=409, detail="Semester registration conflicts with an existing one")

    db.refresh(row)
    logger.info("semester registration created id=%s semester_id=%s", row.id, row.academic_semester_id)
    return row


def list_registrations(db: Session):
    return (
        db.query(SemesterRegistration)
        .options(joinedload(SemesterRegistration.academic_semester))
        .order_by(SemesterRegistration.created_at.desc(), SemesterRegistration.id.desc())
        .all()
    )


def get_registration(db: Session, registration_id: int):
    row = (
        db.query(SemesterRegistration)
        .options(joinedload(SemesterRegistration.academic_semester))
        .filter(SemesterRegistration.id == registration_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Semester registration not found")
    return row


def update_registration(db: Session, registration_id: int, data: dict):
    row = db.query(SemesterRegistration).filter(SemesterRegistration.id == registration_id).first()
    if not row:
        raise HTTPException(status_code=400, detail="Data not found")

    # 欄位皆為 NOT NULL，null 視為不更新
    data = {k: v for k, v in data.items() if v is not None}
    new_status = data.get("status")
    if new_status is not None:
        check_status_transition(row.status, new_status)

    old_status = SemesterRegistrationStatus(row.status)
    for k, v in data.items():
        setattr(row, k, v)

    if row.min_credit > row.max_credit:
        db.rollback()
        raise HTTPException(status_code=400, detail="min_credit can not be greater than max_credit")
    if _as_utc(row.start_date) > _as_utc(row.end_date):
        db.rollback()
        raise HTTPException(status_code=400, detail="start_date can not be later than end_date")

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="There is already an in-flight registration")

    db.refresh(row)
    if new_status is not None:
        logger.info("semester registration %s moved %s -> %s", row.id, old_status.value,
                    SemesterRegistrationStatus(new_status).value)
    return row


def delete_registration(db: Session, registration_id: int):
    row = db.query(SemesterRegistration).filter(SemesterRegistration.id == registration_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Semester registration not found")
    db.delete(row)
    db.commit()
    logger.info("semester registration deleted id=%s", registration_id)
    return {"message": "Semester registration deleted"}


def start_my_registration(db: Session, student_external_id: str):
    student = db.query(Student).filter(Student.student_id == student_external_id).first()
    if not student:
        raise HTTPException(status_code=400, detail="Student not found")

    registration = _find_in_flight(db)
    if not registration:
        raise HTTPException(status_code=400, detail="No semester registration is open")
    if registration.status == SemesterRegistrationStatus.UPCOMING:
        raise HTTPException(status_code=400, detail="Registration is not started yet")

    student_registration = (
        db.query(StudentSemesterRegistration)
        .filter(
            StudentSemesterRegistration.student_id == student.id,
            StudentSemesterRegistration.semester_registration_id == registration.id,
        )
        .first()
    )
    if not student_registration:
        student_registration = StudentSemesterRegistration(
            student_id=student.id,
            semester_registration_id=registration.id,
        )
        db.add(student_registration)
        try:
            db.commit()
        except IntegrityError:
            # 同一學生同時送出兩次
            db.rollback()
            student_registration = (
                db.query(StudentSemesterRegistration)
                .filter(
                    StudentSemesterRegistration.student_id == student.id,
                    StudentSemesterRegistration.semester_registration_id == registration.id,
                )
                .one()
            )
        else:
            db.refresh(student_registration)
            logger.info("student %s started registration %s", student_external_id, registration.id)

    return {
        "semester_registration": registration,
        "student_semester_registration": student_registration,
    }


def confirm_my_registration(db: Session, student_external_id: str):
    registration = _find_ongoing(db)

    student_registration = None
    if registration:
        student_registration = (
            db.query(StudentSemesterRegistration)
            .join(Student, Student.id == StudentSemesterRegistration.student_id)
            .filter(
                StudentSemesterRegistration.semester_registration_id == registration.id,
                Student.student_id == student_external_id,
            )
            .first()
        )

    if not student_registration:
        raise HTTPException(status_code=400, detail="You are not registered for this semester")

    total = student_registration.total_credits_taken or 0
    if total == 0:
        raise HTTPException(status_code=400, detail="You can not confirm your registration with 0 credits")

    if total < registration.min_credit or total > registration.max_credit:
        logger.warning("confirm rejected: student %s has %s credits (allowed %s-%s)",
                       student_external_id, total, registration.min_credit, registration.max_credit)
        raise HTTPException(
            status_code=400,
            detail=f"You can only take {registration.min_credit} to {registration.max_credit} credits",
        )

    student_registration.is_confirmed = True
    db.commit()

    logger.info("student %s confirmed registration %s with %s credits",
                student_external_id, registration.id, total)
    return {"message": "Your registration is confirmed"}


def get_my_registration(db: Session, student_external_id: str):
    registration = _find_ongoing(db)

    student_registration = None
    if registration:
        student_registration = (
            db.query(StudentSemesterRegistration)
            .join(Student, Student.id == StudentSemesterRegistration.student_id)
            .options(joinedload(StudentSemesterRegistration.student))
            .filter(
                StudentSemesterRegistration.semester_registration_id == registration.id,
                Student.student_id == student_external_id,
            )
            .first()
        )

    return {
        "semester_registration": registration,
        "student_semester_registration": student_registration,
    }


def start_new_semester(db: Session, registration_id: int):
    registration = (
        db.query(SemesterRegistration)
        .options(joinedload(SemesterRegistration.academic_semester))
        .filter(SemesterRegistration.id == registration_id)
        .first()
    )
    if not registration:
        raise HTTPException(status_code=400, detail="Semester registration not found")

    if registration.status != SemesterRegistrationStatus.ENDED:
        raise HTTPException(status_code=400, detail="Semester registration is not ended yet")

    if registration.academic_semester.is_current:
        raise HTTPException(status_code=400, detail="Semester is already started")

    counts = finalize_semester_registration(db, registration)
    return {"message": "Semester started successfully", **counts}


def get_my_semester_reg_courses(db: Session, student_external_id: str):
    student = db.query(Student).filter(Student.student_id == student_external_id).first()
    if not student:
        raise HTTPException(status_code=400, detail="Student not found")

    registration = _find_in_flight(db)
    if not registration:
        raise HTTPException(status_code=400, detail="No semester registration found")

    completed_ids = [
        cid for (cid,) in db.query(StudentEnrolledCourse.course_id)
        .filter(
            StudentEnrolledCourse.student_id == student.id,
            StudentEnrolledCourse.status == StudentEnrolledCourseStatus.COMPLETED,
        )
        .all()
    ]

    taken = (
        db.query(StudentSemesterRegistrationCourse)
        .filter(
            StudentSemesterRegistrationCourse.student_id == student.id,
            StudentSemesterRegistrationCourse.semester_registration_id == registration.id,
        )
        .all()
    )

    offered_courses = (
        db.query(OfferedCourse)
        .options(
            joinedload(OfferedCourse.course).selectinload(Course.prerequisites),
            selectinload(OfferedCourse.sections)
            .selectinload(OfferedCourseSection.class_schedules)
            .joinedload(OfferedCourseClassSchedule.room)
            .joinedload(Room.building),
        )
        .filter(
            OfferedCourse.semester_registration_id == registration.id,
            OfferedCourse.academic_department_id == student.academic_department_id,
        )
        .order_by(OfferedCourse.id.asc())
        .all()
    )

    return get_available_courses(offered_courses, completed_ids, taken)
