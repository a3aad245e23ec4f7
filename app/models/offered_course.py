from sqlalchemy import Column, Integer, String, Enum, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import WeekDay


class OfferedCourse(Base):
    __tablename__ = "offered_courses"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    academic_department_id = Column(Integer, ForeignKey("academic_departments.id"), nullable=False, index=True)
    semester_registration_id = Column(
        Integer, ForeignKey("semester_registrations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course = relationship("Course")
    sections = relationship(
        "OfferedCourseSection",
        back_populates="offered_course",
        order_by="OfferedCourseSection.id",
    )


class OfferedCourseSection(Base):
    __tablename__ = "offered_course_sections"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(50), nullable=False)

    # None 代表不限人數
    max_capacity = Column(Integer, nullable=True)
    currently_enrolled_student = Column(Integer, nullable=False, default=0)

    offered_course_id = Column(Integer, ForeignKey("offered_courses.id", ondelete="CASCADE"), nullable=False, index=True)
    semester_registration_id = Column(
        Integer, ForeignKey("semester_registrations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    offered_course = relationship("OfferedCourse", back_populates="sections")
    class_schedules = relationship(
        "OfferedCourseClassSchedule",
        back_populates="offered_course_section",
        order_by="OfferedCourseClassSchedule.id",
    )


class OfferedCourseClassSchedule(Base):
    __tablename__ = "offered_course_class_schedules"

    id = Column(Integer, primary_key=True)
    start_time = Column(String(5), nullable=False)  # "09:00"
    end_time = Column(String(5), nullable=False)
    day_of_week = Column(Enum(WeekDay, native_enum=False, length=20), nullable=False, default=WeekDay.SATURDAY)

    offered_course_section_id = Column(
        Integer, ForeignKey("offered_course_sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    semester_registration_id = Column(
        Integer, ForeignKey("semester_registrations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)

    offered_course_section = relationship("OfferedCourseSection", back_populates="class_schedules")
    room = relationship("Room")
