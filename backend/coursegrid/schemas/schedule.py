from datetime import time

from pydantic import BaseModel

from coursegrid.models.schedule_block import Weekday


class ScheduleBlockOut(BaseModel):
    id: str
    course_id: str
    weekday: Weekday
    start_time: time
    end_time: time

    model_config = {"from_attributes": True}


class StudentScheduleEntryOut(BaseModel):
    block_id: str
    course_id: str
    course_code: str
    course_name: str
    teacher_name: str | None = None
    weekday: Weekday
    start_time: time
    end_time: time


class StudentScheduleOut(BaseModel):
    student_id: str
    entries: list[StudentScheduleEntryOut]
    by_weekday: dict[str, list[StudentScheduleEntryOut]]


class TeacherScheduleEntryOut(BaseModel):
    block_id: str
    course_id: str
    course_code: str
    course_name: str
    enrolled_count: int
    weekday: Weekday
    start_time: time
    end_time: time


class TeacherScheduleOut(BaseModel):
    teacher_id: str
    entries: list[TeacherScheduleEntryOut]
    by_weekday: dict[str, list[TeacherScheduleEntryOut]]
