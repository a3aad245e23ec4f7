from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.enrollment import EnrollCourseIn
from app.schemas.semester_registration import MessageOut
from app.services import enrollment
from app.utils.auth import require_student

router = APIRouter(prefix="/student-semester-registration-courses", tags=["Student Semester Registration Course"])


@router.post("/enroll-into-course", response_model=MessageOut)
def enroll_into_course(body: EnrollCourseIn, db: Session = Depends(get_db), user=Depends(require_student)):
    return enrollment.enroll_into_course(db, user.username, body.offered_course_id, body.offered_course_section_id)


@router.post("/withdraw-from-course", response_model=MessageOut)
def withdraw_from_course(body: EnrollCourseIn, db: Session = Depends(get_db), user=Depends(require_student)):
    return enrollment.withdraw_from_course(db, user.username, body.offered_course_id, body.offered_course_section_id)
