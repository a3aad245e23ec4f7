from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    # 對外學號，與登入帳號相同
    student_id = Column(String(32), unique=True, nullable=False, index=True)

    first_name = Column(String(50), nullable=False)
    middle_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=True)
    contact_no = Column(String(30), nullable=True)

    academic_department_id = Column(Integer, ForeignKey("academic_departments.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    academic_department = relationship("AcademicDepartment")
