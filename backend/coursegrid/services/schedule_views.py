from __future__ import annotations

from collections import defaultdict
from datetime import time

from sqlalchemy import select
from sqlalchemy.orm import Session

from coursegrid.models.course import Course
from coursegrid.models.schedule_block import WEEKDAYS, ScheduleBlock, Weekday
from coursegrid.models.student_block_assignment import StudentBlockAssignment
from coursegrid.models.user import User, UserRole
from coursegrid.services.enrollment import enrolled_counts, get_user_with_role
from coursegrid.services.schedule_sync import sync_for_student


def block_sort_key(weekday: Weekday, start_time: time) -> tuple[int, time]:
    return WEEKDAYS.index(weekday), start_time


def sort_blocks(blocks: list[ScheduleBlock]) -> list[ScheduleBlock]:
    return sorted(blocks, key=lambda block: block_sort_key(block.weekday, block.start_time))


def group_by_weekday(entries: list[dict]) -> dict[str, list[dict]]:
    grid: dict[str, list[dict]] = defaultdict(list)
    for entry in entries:
        grid[entry["weekday"].value].append(entry)
    return {day.value: grid.get(day.value, []) for day in WEEKDAYS}


def student_schedule(db: Session, student_id: str, *, resync: bool = False) -> list[dict]:
    """Weekly blocks for a student, read from the materialized assignments.

    ``resync`` reconciles the student's assignments first, for views that poll.
    """
    get_user_with_role(db, student_id, UserRole.student)
    if resync:
        sync_for_student(db, student_id)

    rows = db.execute(
        select(ScheduleBlock, Course, User.name.label("teacher_name"))
        .join(StudentBlockAssignment, StudentBlockAssignment.block_id == ScheduleBlock.id)
        .join(Course, Course.id == ScheduleBlock.course_id)
        .outerjoin(User, User.id == Course.teacher_id)
        .where(StudentBlockAssignment.student_id == student_id)
    ).all()
    entries = [
        {
            "block_id": row.ScheduleBlock.id,
            "course_id": row.Course.id,
            "course_code": row.Course.code,
            "course_name": row.Course.name,
            "teacher_name": row.teacher_name,
            "weekday": row.ScheduleBlock.weekday,
            "start_time": row.ScheduleBlock.start_time,
            "end_time": row.ScheduleBlock.end_time,
        }
        for row in rows
    ]
    return sorted(entries, key=lambda entry: block_sort_key(entry["weekday"], entry["start_time"]))


def teacher_schedule(db: Session, teacher_id: str) -> list[dict]:
    get_user_with_role(db, teacher_id, UserRole.teacher)
    counts = enrolled_counts(db)
    rows = db.execute(
        select(ScheduleBlock, Course)
        .join(Course, Course.id == ScheduleBlock.course_id)
        .where(Course.teacher_id == teacher_id)
    ).all()
    entries = [
        {
            "block_id": row.ScheduleBlock.id,
            "course_id": row.Course.id,
            "course_code": row.Course.code,
            "course_name": row.Course.name,
            "enrolled_count": counts.get(row.Course.id, 0),
            "weekday": row.ScheduleBlock.weekday,
            "start_time": row.ScheduleBlock.start_time,
            "end_time": row.ScheduleBlock.end_time,
        }
        for row in rows
    ]
    return sorted(entries, key=lambda entry: block_sort_key(entry["weekday"], entry["start_time"]))
