from typing import Any, Dict, Iterable, List, Optional


def _available_seats(section) -> Optional[int]:
    if section.max_capacity is None:
        return None
    return max(0, section.max_capacity - (section.currently_enrolled_student or 0))


def _schedule_to_dict(schedule) -> Dict[str, Any]:
    room = schedule.room
    building = room.building if room else None
    return {
        "id": schedule.id,
        "day_of_week": schedule.day_of_week,
        "start_time": schedule.start_time,
        "end_time": schedule.end_time,
        "room_number": room.room_number if room else None,
        "floor": room.floor if room else None,
        "building": building.title if building else None,
    }


def get_available_courses(
    offered_courses: Iterable,
    completed_course_ids: Iterable[int],
    taken_courses: Iterable,
) -> List[Dict[str, Any]]:
    """
    offered_courses: 該學期註冊、學生所屬系所的開課 (含 course.prerequisites / sections / schedules)
    completed_course_ids: 已修畢 (COMPLETED) 的 course id
    taken_courses: 本學期已選的 StudentSemesterRegistrationCourse

    規則：
    1. 已修畢的課不列出
    2. 先修課全部修畢才列出
    3. 已選的課標記 is_taken，並標記選的是哪個 section
    """
    completed = set(completed_course_ids)
    taken_section_by_offered = {t.offered_course_id: t.offered_course_section_id for t in taken_courses}

    result = []
    for oc in offered_courses:
        course = oc.course
        if course.id in completed:
            continue

        prerequisite_ids = [p.prerequisite_id for p in course.prerequisites]
        if not all(pid in completed for pid in prerequisite_ids):
            continue

        taken_section_id = taken_section_by_offered.get(oc.id)

        sections = []
        for s in oc.sections:
            sections.append({
                "id": s.id,
                "title": s.title,
                "max_capacity": s.max_capacity,
                "currently_enrolled_student": s.currently_enrolled_student or 0,
                "available_seats": _available_seats(s),
                "is_taken": taken_section_id is not None and s.id == taken_section_id,
                "class_schedules": [_schedule_to_dict(cs) for cs in s.class_schedules],
            })

        result.append({
            "id": oc.id,
            "course_id": course.id,
            "title": course.title,
            "code": course.code,
            "credits": course.credits,
            "prerequisite_ids": prerequisite_ids,
            "is_taken": taken_section_id is not None,
            "sections": sections,
        })

    return result
