from sqlalchemy import Column, Integer, Boolean, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import SemesterRegistrationStatus, IN_FLIGHT_STATUSES


def _in_flight_default(context):
    # 依 insert 的 status 決定：ENDED 為 NULL
    status = context.get_current_parameters().get("status")
    if status is None or SemesterRegistrationStatus(status) in IN_FLIGHT_STATUSES:
        return True
    return None


class SemesterRegistration(Base):
    __tablename__ = "semester_registrations"
    __table_args__ = (
        CheckConstraint("min_credit <= max_credit", name="ck_semester_registrations_credit_range"),
    )

    id = Column(Integer, primary_key=True, index=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)

    status = Column(
        Enum(SemesterRegistrationStatus, native_enum=False, length=20),
        nullable=False,
        default=SemesterRegistrationStatus.UPCOMING,
    )

    # UPCOMING / ONGOING 時為 True，ENDED 時為 NULL；
    # unique 讓資料庫保證最多只有一筆在進行中 (NULL 不互相衝突)
    in_flight = Column(Boolean, nullable=True, unique=True, default=_in_flight_default)

    min_credit = Column(Integer, nullable=False, default=0)
    max_credit = Column(Integer, nullable=False, default=0)

    academic_semester_id = Column(
        Integer, ForeignKey("academic_semesters.id"), nullable=False, unique=True, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    academic_semester = relationship("AcademicSemester")

    @validates("status")
    def _sync_in_flight(self, key, status):
        self.in_flight = True if SemesterRegistrationStatus(status) in IN_FLIGHT_STATUSES else None
        return status
