import enum


class SemesterRegistrationStatus(str, enum.Enum):
    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    ENDED = "ENDED"


# 同一時間只能有一筆在進行中的學期註冊
IN_FLIGHT_STATUSES = (SemesterRegistrationStatus.UPCOMING, SemesterRegistrationStatus.ONGOING)


class StudentEnrolledCourseStatus(str, enum.Enum):
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    WITHDRAWN = "WITHDRAWN"


class ExamType(str, enum.Enum):
    MIDTERM = "MIDTERM"
    FINAL = "FINAL"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PARTIAL_PAID = "PARTIAL_PAID"
    FULL_PAID = "FULL_PAID"


class WeekDay(str, enum.Enum):
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
