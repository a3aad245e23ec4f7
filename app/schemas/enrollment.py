from typing import List, Optional
from pydantic import BaseModel

from app.models.enums import WeekDay


class EnrollCourseIn(BaseModel):
    offered_course_id: int
    offered_course_section_id: int


class ClassScheduleOut(BaseModel):
    id: int
    day_of_week: WeekDay
    start_time: str
    end_time: str
    room_number: Optional[str] = None
    floor: Optional[str] = None
    building: Optional[str] = None


class AvailableSectionOut(BaseModel):
    id: int
    title: str
    max_capacity: Optional[int] = None
    currently_enrolled_student: int
    available_seats: Optional[int] = None
    is_taken: bool
    class_schedules: List[ClassScheduleOut] = []


class AvailableCourseOut(BaseModel):
    id: int
    course_id: int
    title: str
    code: str
    credits: int
    prerequisite_ids: List[int] = []
    is_taken: bool
    sections: List[AvailableSectionOut] = []
