from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from app.database import Base

class AcademicSemester(Base):
    __tablename__ = "academic_semesters"

    id = Column(Integer, primary_key=True, index=True)
    year = Column(Integer, nullable=False)
    title = Column(String(20), nullable=False)   # Autumn / Summer / Fall
    code = Column(String(10), nullable=False)    # 01 / 02 / 03
    start_month = Column(String(20), nullable=False)
    end_month = Column(String(20), nullable=False)

    # 全系統最多一個 current
    is_current = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
