from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from coursegrid.core.config import get_settings
from coursegrid.core.exceptions import ConflictError, ResourceNotFoundError
from coursegrid.models.course import Course
from coursegrid.models.schedule_block import ScheduleBlock
from coursegrid.models.user import UserRole
from coursegrid.services.block_generator import BlockSpec, SlotPicker, generate_blocks, slot_picker_for_seed
from coursegrid.services.enrollment import get_user_with_role
from coursegrid.services.orphan_cleanup import delete_course_blocks
from coursegrid.services.schedule_sync import SyncResult, sync_for_course
from coursegrid.services.schedule_views import sort_blocks

logger = logging.getLogger(__name__)


def default_slot_picker() -> SlotPicker:
    return slot_picker_for_seed(get_settings().schedule_random_seed)


def persist_blocks(db: Session, course: Course, specs: list[BlockSpec]) -> list[ScheduleBlock]:
    blocks = [
        ScheduleBlock(
            course_id=course.id,
            weekday=planned.weekday,
            start_time=planned.start_time,
            end_time=planned.end_time,
        )
        for planned in specs
    ]
    db.add_all(blocks)
    db.flush()
    return blocks


def list_course_blocks(db: Session, course_id: str) -> list[ScheduleBlock]:
    if db.get(Course, course_id) is None:
        raise ResourceNotFoundError("Course", course_id)
    blocks = list(db.execute(select(ScheduleBlock).where(ScheduleBlock.course_id == course_id)).scalars())
    return sort_blocks(blocks)


def create_course_with_schedule(
    db: Session,
    *,
    code: str,
    name: str,
    credits: int,
    capacity: int,
    teacher_id: str | None = None,
    slot_picker: SlotPicker | None = None,
) -> tuple[Course, list[ScheduleBlock], SyncResult]:
    if teacher_id is not None:
        get_user_with_role(db, teacher_id, UserRole.teacher)
    existing = db.execute(select(Course.id).where(Course.code == code)).first()
    if existing is not None:
        raise ConflictError("Course code already exists", details={"code": code})

    specs = generate_blocks(credits, slot_picker=slot_picker or default_slot_picker())

    course = Course(code=code, name=name, credits=credits, capacity=capacity, teacher_id=teacher_id)
    db.add(course)
    db.flush()
    blocks = persist_blocks(db, course, specs)
    result = sync_for_course(db, course.id)

    logger.info("Created course %s (%s) with %d schedule block(s)", course.code, course.id, len(blocks))
    return course, sort_blocks(blocks), result


def regenerate_course_schedule(
    db: Session,
    course_id: str,
    *,
    slot_picker: SlotPicker | None = None,
) -> tuple[Course, list[ScheduleBlock], SyncResult]:
    """Replace a course's blocks with a freshly generated batch and refan enrolled students."""
    course = db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)

    specs = generate_blocks(course.credits, slot_picker=slot_picker or default_slot_picker())
    removed_assignments, removed_blocks = delete_course_blocks(db, course_id)
    blocks = persist_blocks(db, course, specs)
    result = sync_for_course(db, course_id)
    result.removed += removed_assignments

    logger.info(
        "Regenerated schedule for course %s: %d block(s) replaced by %d",
        course.code,
        removed_blocks,
        len(blocks),
    )
    return course, sort_blocks(blocks), result
