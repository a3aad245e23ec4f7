import logging

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.models.enums import SemesterRegistrationStatus
from app.models.offered_course import OfferedCourse, OfferedCourseSection
from app.models.semester_registration import SemesterRegistration
from app.models.student import Student
from app.models.student_semester_registration import (
    StudentSemesterRegistration,
    StudentSemesterRegistrationCourse,
)

logger = logging.getLogger("app.enrollment")


def _resolve_context(db: Session, student_external_id: str, offered_course_id: int):
    """
    找出 學生 / 進行中(ONGOING)的學期註冊 / 開課，任一不存在就 404
    """
    student = db.query(Student).filter(Student.student_id == student_external_id).first()
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    registration = (
        db.query(SemesterRegistration)
        .filter(SemesterRegistration.status == SemesterRegistrationStatus.ONGOING)
        .first()
    )
    if not registration:
        raise HTTPException(status_code=404, detail="Semester registration not found")

    offered_course = (
        db.query(OfferedCourse)
        .options(joinedload(OfferedCourse.course))
        .filter(OfferedCourse.id == offered_course_id)
        .first()
    )
    if not offered_course:
        raise HTTPException(status_code=404, detail="Offered course not found")

    return student, registration, offered_course


def _get_student_registration(db: Session, student_id: int, registration_id: int):
    row = (
        db.query(StudentSemesterRegistration)
        .filter(
            StudentSemesterRegistration.student_id == student_id,
            StudentSemesterRegistration.semester_registration_id == registration_id,
        )
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Student semester registration not found")
    return row


def _is_full(section: OfferedCourseSection) -> bool:
    if section.max_capacity is None:
        return False
    return (section.currently_enrolled_student or 0) >= section.max_capacity


def enroll_into_course(
    db: Session,
    student_external_id: str,
    offered_course_id: int,
    offered_course_section_id: int,
):
    student, registration, offered_course = _resolve_context(db, student_external_id, offered_course_id)

    section = db.query(OfferedCourseSection).filter(OfferedCourseSection.id == offered_course_section_id).first()
    if not section:
        raise HTTPException(status_code=404, detail="Offered course section not found")

    if offered_course.semester_registration_id != registration.id:
        raise HTTPException(status_code=400, detail="Offered course is not part of the ongoing registration")
    if section.offered_course_id != offered_course.id:
        raise HTTPException(status_code=400, detail="Section does not belong to the offered course")

    if _is_full(section):
        logger.warning("enroll rejected: section %s is full (%s/%s)",
                       section.id, section.currently_enrolled_student, section.max_capacity)
        raise HTTPException(status_code=400, detail="Enrollment seat is full")

    student_registration = _get_student_registration(db, student.id, registration.id)

    already = (
        db.query(StudentSemesterRegistrationCourse)
        .filter(
            StudentSemesterRegistrationCourse.semester_registration_id == registration.id,
            StudentSemesterRegistrationCourse.student_id == student.id,
            StudentSemesterRegistrationCourse.offered_course_id == offered_course.id,
        )
        .first()
    )
    if already:
        raise HTTPException(status_code=409, detail="Already enrolled into this course")

    credits = offered_course.course.credits or 0

    # 三個寫入必須一起成功
    try:
        db.add(StudentSemesterRegistrationCourse(
            semester_registration_id=registration.id,
            student_id=student.id,
            offered_course_id=offered_course.id,
            offered_course_section_id=section.id,
        ))
        db.flush()

        # 條件式 update：在交易內重新檢查名額，避免同時選課超收
        reserved = (
            db.query(OfferedCourseSection)
            .filter(
                OfferedCourseSection.id == section.id,
                or_(
                    OfferedCourseSection.max_capacity.is_(None),
                    OfferedCourseSection.currently_enrolled_student < OfferedCourseSection.max_capacity,
                ),
            )
            .update(
                {OfferedCourseSection.currently_enrolled_student: OfferedCourseSection.currently_enrolled_student + 1},
                synchronize_session="fetch",
            )
        )
        if not reserved:
            raise HTTPException(status_code=400, detail="Enrollment seat is full")

        (
            db.query(StudentSemesterRegistration)
            .filter(StudentSemesterRegistration.id == student_registration.id)
            .update(
                {StudentSemesterRegistration.total_credits_taken: StudentSemesterRegistration.total_credits_taken + credits},
                synchronize_session="fetch",
            )
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already enrolled into this course")
    except Exception:
        db.rollback()
        raise

    logger.info("student %s enrolled offered_course=%s section=%s (+%s credits)",
                student_external_id, offered_course.id, section.id, credits)
    return {"message": "Successfully enrolled into course"}


def withdraw_from_course(
    db: Session,
    student_external_id: str,
    offered_course_id: int,
    offered_course_section_id: int,
):
    student, registration, offered_course = _resolve_context(db, student_external_id, offered_course_id)
    student_registration = _get_student_registration(db, student.id, registration.id)

    credits = offered_course.course.credits or 0

    try:
        row = (
            db.query(StudentSemesterRegistrationCourse)
            .filter(
                StudentSemesterRegistrationCourse.semester_registration_id == registration.id,
                StudentSemesterRegistrationCourse.student_id == student.id,
                StudentSemesterRegistrationCourse.offered_course_id == offered_course.id,
            )
            .first()
        )
        if not row:
            raise HTTPException(status_code=404, detail="Enrolled course not found")
        if row.offered_course_section_id != offered_course_section_id:
            raise HTTPException(status_code=400, detail="Student is not enrolled in this section")

        db.delete(row)

        (
            db.query(OfferedCourseSection)
            .filter(
                OfferedCourseSection.id == offered_course_section_id,
                OfferedCourseSection.currently_enrolled_student > 0,
            )
            .update(
                {OfferedCourseSection.currently_enrolled_student: OfferedCourseSection.currently_enrolled_student - 1},
                synchronize_session="fetch",
            )
        )
        (
            db.query(StudentSemesterRegistration)
            .filter(StudentSemesterRegistration.id == student_registration.id)
            .update(
                {StudentSemesterRegistration.total_credits_taken: StudentSemesterRegistration.total_credits_taken - credits},
                synchronize_session="fetch",
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("student %s withdrew offered_course=%s section=%s (-%s credits)",
                student_external_id, offered_course.id, offered_course_section_id, credits)
    return {"message": "Successfully withdrew from course"}
