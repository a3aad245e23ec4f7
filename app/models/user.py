from sqlalchemy import Column, Integer, String, TIMESTAMP
from datetime import datetime
from app.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # 學生帳號的 username 就是學號 (students.student_id)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False)  # admin / student
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
