from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import StudentEnrolledCourseStatus, ExamType


class StudentEnrolledCourse(Base):
    __tablename__ = "student_enrolled_courses"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_id", "academic_semester_id",
            name="uq_student_enrolled_courses_student_course_semester",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    academic_semester_id = Column(Integer, ForeignKey("academic_semesters.id"), nullable=False, index=True)

    grade = Column(String(5), nullable=True)
    point = Column(Float, nullable=True, default=0)
    total_marks = Column(Integer, nullable=True, default=0)

    status = Column(
        Enum(StudentEnrolledCourseStatus, native_enum=False, length=20),
        nullable=False,
        default=StudentEnrolledCourseStatus.ONGOING,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course = relationship("Course")
    marks = relationship("StudentEnrolledCourseMark", back_populates="student_enrolled_course")


class StudentEnrolledCourseMark(Base):
    __tablename__ = "student_enrolled_course_marks"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    student_enrolled_course_id = Column(
        Integer, ForeignKey("student_enrolled_courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    academic_semester_id = Column(Integer, ForeignKey("academic_semesters.id"), nullable=False)

    # 預設成績：尚未評分
    exam_type = Column(Enum(ExamType, native_enum=False, length=20), nullable=True, default=ExamType.MIDTERM)
    marks = Column(Integer, nullable=True)
    grade = Column(String(5), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    student_enrolled_course = relationship("StudentEnrolledCourse", back_populates="marks")
