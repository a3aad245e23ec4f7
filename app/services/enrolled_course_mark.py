from sqlalchemy.orm import Session

from app.models.enums import ExamType
from app.models.student_enrolled_course import StudentEnrolledCourseMark


def create_default_mark(
    db: Session,
    student_id: int,
    student_enrolled_course_id: int,
    academic_semester_id: int,
):
    # 未評分的預設成績，之後由評分流程更新
    mark = StudentEnrolledCourseMark(
        student_id=student_id,
        student_enrolled_course_id=student_enrolled_course_id,
        academic_semester_id=academic_semester_id,
        exam_type=ExamType.MIDTERM,
        marks=None,
        grade=None,
    )
    db.add(mark)
    db.flush()
    return mark
