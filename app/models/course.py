from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    code = Column(String(20), nullable=False, unique=True)
    credits = Column(Integer, nullable=False, default=0)

    # relationship
    prerequisites = relationship(
        "CourseToPrerequisite",
        foreign_keys="CourseToPrerequisite.course_id",
        back_populates="course",
        cascade="all, delete-orphan",
    )


class CourseToPrerequisite(Base):
    __tablename__ = "course_to_prerequisites"

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)
    prerequisite_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)

    course = relationship("Course", foreign_keys=[course_id], back_populates="prerequisites")
    prerequisite = relationship("Course", foreign_keys=[prerequisite_id])
