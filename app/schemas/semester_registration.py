from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import SemesterRegistrationStatus


class AcademicSemesterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int
    title: str
    code: str
    start_month: str
    end_month: str
    is_current: bool


class SemesterRegistrationCreate(BaseModel):
    start_date: datetime
    end_date: datetime
    academic_semester_id: int
    min_credit: int = Field(0, ge=0)
    max_credit: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _validate_ranges(self):
        if self.min_credit > self.max_credit:
            raise ValueError("min_credit 不能大於 max_credit")
        if self.start_date > self.end_date:
            raise ValueError("start_date 不能晚於 end_date")
        return self


class SemesterRegistrationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[SemesterRegistrationStatus] = None
    min_credit: Optional[int] = Field(None, ge=0)
    max_credit: Optional[int] = Field(None, ge=0)


class SemesterRegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_date: datetime
    end_date: datetime
    status: SemesterRegistrationStatus
    min_credit: int
    max_credit: int
    academic_semester_id: int
    academic_semester: Optional[AcademicSemesterOut] = None


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    email: Optional[str] = None
    academic_department_id: Optional[int] = None


class StudentSemesterRegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    semester_registration_id: int
    is_confirmed: bool
    total_credits_taken: int


class StudentSemesterRegistrationWithStudentOut(StudentSemesterRegistrationOut):
    student: Optional[StudentOut] = None


class StartMyRegistrationOut(BaseModel):
    semester_registration: SemesterRegistrationOut
    student_semester_registration: StudentSemesterRegistrationOut


class MyRegistrationOut(BaseModel):
    semester_registration: Optional[SemesterRegistrationOut] = None
    student_semester_registration: Optional[StudentSemesterRegistrationWithStudentOut] = None


class MessageOut(BaseModel):
    message: str


class StartNewSemesterOut(MessageOut):
    confirmed_students: int
    payments_created: int
    enrolled_courses_created: int
