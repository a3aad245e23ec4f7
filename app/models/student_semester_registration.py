from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class StudentSemesterRegistration(Base):
    __tablename__ = "student_semester_registrations"
    __table_args__ = (
        UniqueConstraint("student_id", "semester_registration_id", name="uq_student_semester_registrations_student_reg"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    semester_registration_id = Column(
        Integer, ForeignKey("semester_registrations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    is_confirmed = Column(Boolean, nullable=False, default=False)
    total_credits_taken = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    student = relationship("Student")
    semester_registration = relationship("SemesterRegistration")


class StudentSemesterRegistrationCourse(Base):
    __tablename__ = "student_semester_registration_courses"

    # (registration, student, offered_course) 是退選時的查詢 key
    semester_registration_id = Column(
        Integer, ForeignKey("semester_registrations.id", ondelete="CASCADE"), primary_key=True
    )
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True)
    offered_course_id = Column(Integer, ForeignKey("offered_courses.id", ondelete="CASCADE"), primary_key=True)

    offered_course_section_id = Column(
        Integer, ForeignKey("offered_course_sections.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    offered_course = relationship("OfferedCourse")
    offered_course_section = relationship("OfferedCourseSection")
