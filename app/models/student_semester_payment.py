from sqlalchemy import Column, Integer, Enum, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import PaymentStatus


class StudentSemesterPayment(Base):
    __tablename__ = "student_semester_payments"
    __table_args__ = (
        UniqueConstraint("student_id", "academic_semester_id", name="uq_student_semester_payments_student_semester"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    academic_semester_id = Column(Integer, ForeignKey("academic_semesters.id"), nullable=False, index=True)

    full_payment_amount = Column(Integer, nullable=False, default=0)
    partial_payment_amount = Column(Integer, nullable=False, default=0)
    total_due_amount = Column(Integer, nullable=False, default=0)
    total_paid_amount = Column(Integer, nullable=False, default=0)

    payment_status = Column(
        Enum(PaymentStatus, native_enum=False, length=20),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
