import logging

from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.models.academic_semester import AcademicSemester
from app.models.offered_course import OfferedCourse
from app.models.semester_registration import SemesterRegistration
from app.models.student_enrolled_course import StudentEnrolledCourse
from app.models.student_semester_registration import (
    StudentSemesterRegistration,
    StudentSemesterRegistrationCourse,
)
from app.services.enrolled_course_mark import create_default_mark
from app.services.semester_payment import create_semester_payment

logger = logging.getLogger("app.finalization")


def _switch_current_semester(db: Session, academic_semester_id: int):
    db.query(AcademicSemester).filter(AcademicSemester.is_current.is_(True)).update(
        {AcademicSemester.is_current: False}, synchronize_session="fetch"
    )
    db.query(AcademicSemester).filter(AcademicSemester.id == academic_semester_id).update(
        {AcademicSemester.is_current: True}, synchronize_session="fetch"
    )


def _finalize_student(db: Session, student_registration: StudentSemesterRegistration, academic_semester_id: int):
    """
    單一學生：產生學費 + 把已選課轉成正式修課紀錄 (含預設成績)。
    每一步都先檢查是否已存在，重跑不會產生重複資料。
    回傳 (新建繳費筆數, 新建修課筆數)
    """
    payments_created = 0
    enrolled_created = 0

    credits = student_registration.total_credits_taken or 0
    if credits > 0:
        payment = create_semester_payment(
            db,
            student_id=student_registration.student_id,
            academic_semester_id=academic_semester_id,
            total_payment_amount=credits * settings.PAYMENT_PER_CREDIT,
        )
        if payment is not None:
            payments_created += 1

    registration_courses = (
        db.query(StudentSemesterRegistrationCourse)
        .options(joinedload(StudentSemesterRegistrationCourse.offered_course).joinedload(OfferedCourse.course))
        .filter(
            StudentSemesterRegistrationCourse.semester_registration_id == student_registration.semester_registration_id,
            StudentSemesterRegistrationCourse.student_id == student_registration.student_id,
        )
        .all()
    )

    for item in registration_courses:
        course_id = item.offered_course.course_id
        exists_row = (
            db.query(StudentEnrolledCourse.id)
            .filter(
                StudentEnrolledCourse.student_id == item.student_id,
                StudentEnrolledCourse.course_id == course_id,
                StudentEnrolledCourse.academic_semester_id == academic_semester_id,
            )
            .first()
        )
        if exists_row:
            continue

        enrolled = StudentEnrolledCourse(
            student_id=item.student_id,
            course_id=course_id,
            academic_semester_id=academic_semester_id,
        )
        db.add(enrolled)
        db.flush()

        create_default_mark(
            db,
            student_id=item.student_id,
            student_enrolled_course_id=enrolled.id,
            academic_semester_id=academic_semester_id,
        )
        enrolled_created += 1

    return payments_created, enrolled_created


def finalize_semester_registration(db: Session, registration: SemesterRegistration):
    """
    開學流程 (整個在同一個 transaction 內)：
    1. 切換 current 學期
    2. 已確認 (is_confirmed) 的學生：產生學費、建立修課紀錄與預設成績
    未確認的學生直接略過。任何一步失敗就全部 rollback。
    """
    registration_id = registration.id
    academic_semester_id = registration.academic_semester_id
    payments_created = 0
    enrolled_created = 0

    try:
        _switch_current_semester(db, academic_semester_id)

        confirmed = (
            db.query(StudentSemesterRegistration)
            .filter(
                StudentSemesterRegistration.semester_registration_id == registration_id,
                StudentSemesterRegistration.is_confirmed.is_(True),
            )
            .order_by(StudentSemesterRegistration.id.asc())
            .all()
        )

        for student_registration in confirmed:
            p, e = _finalize_student(db, student_registration, academic_semester_id)
            payments_created += p
            enrolled_created += e

        db.commit()
    except Exception as exc:
        db.rollback()
        # traceback 由 main.py 的 middleware 記錄
        logger.warning("semester finalization rolled back registration_id=%s: %r", registration_id, exc)
        raise

    logger.info(
        "semester started registration_id=%s semester_id=%s students=%d payments=%d enrolled_courses=%d",
        registration_id, academic_semester_id, len(confirmed), payments_created, enrolled_created,
    )
    return {
        "confirmed_students": len(confirmed),
        "payments_created": payments_created,
        "enrolled_courses_created": enrolled_created,
    }
