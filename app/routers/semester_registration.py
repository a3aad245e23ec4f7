from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.enrollment import EnrollCourseIn, AvailableCourseOut
from app.schemas.semester_registration import (
    SemesterRegistrationCreate,
    SemesterRegistrationUpdate,
    SemesterRegistrationOut,
    StartMyRegistrationOut,
    MyRegistrationOut,
    MessageOut,
    StartNewSemesterOut,
)
from app.services import enrollment, semester_registration as service
from app.utils.auth import require_admin, require_student

router = APIRouter(prefix="/semester-registrations", tags=["Semester Registration"])


# ---- 學生 ----
# 固定路徑要放在 /{registration_id} 前面

@router.get("/get-my-registration", response_model=MyRegistrationOut)
def get_my_registration(db: Session = Depends(get_db), user=Depends(require_student)):
    return service.get_my_registration(db, user.username)


@router.get("/get-my-semester-courses", response_model=List[AvailableCourseOut])
def get_my_semester_reg_courses(db: Session = Depends(get_db), user=Depends(require_student)):
    return service.get_my_semester_reg_courses(db, user.username)


@router.post("/start-registration", response_model=StartMyRegistrationOut)
def start_my_registration(db: Session = Depends(get_db), user=Depends(require_student)):
    return service.start_my_registration(db, user.username)


@router.post("/enroll-into-course", response_model=MessageOut)
def enroll_into_course(body: EnrollCourseIn, db: Session = Depends(get_db), user=Depends(require_student)):
    return enrollment.enroll_into_course(db, user.username, body.offered_course_id, body.offered_course_section_id)


@router.post("/withdraw-from-course", response_model=MessageOut)
def withdraw_from_course(body: EnrollCourseIn, db: Session = Depends(get_db), user=Depends(require_student)):
    return enrollment.withdraw_from_course(db, user.username, body.offered_course_id, body.offered_course_section_id)


@router.post("/confirm-my-registration", response_model=MessageOut)
def confirm_my_registration(db: Session = Depends(get_db), user=Depends(require_student)):
    return service.confirm_my_registration(db, user.username)


# ---- 管理者 ----

@router.post("", response_model=SemesterRegistrationOut)
def create_registration(
    body: SemesterRegistrationCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    return service.create_registration(db, body.model_dump())


@router.get("", response_model=List[SemesterRegistrationOut])
def list_registrations(db: Session = Depends(get_db), admin=Depends(require_admin)):
    return service.list_registrations(db)


@router.get("/{registration_id}", response_model=SemesterRegistrationOut)
def get_registration(registration_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return service.get_registration(db, registration_id)


@router.patch("/{registration_id}", response_model=SemesterRegistrationOut)
def update_registration(
    registration_id: int,
    body: SemesterRegistrationUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    return service.update_registration(db, registration_id, body.model_dump(exclude_unset=True))


@router.delete("/{registration_id}", response_model=MessageOut)
def delete_registration(registration_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return service.delete_registration(db, registration_id)


@router.post("/{registration_id}/start-new-semester", response_model=StartNewSemesterOut)
def start_new_semester(registration_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return service.start_new_semester(db, registration_id)
