from datetime import time

import pytest
from sqlalchemy import func, select

from coursegrid.core.config import Settings
from coursegrid.core.exceptions import ConflictError, InvalidCreditsError, ResourceNotFoundError
from coursegrid.models.course import Course
from coursegrid.models.schedule_block import Weekday
from coursegrid.models.student_block_assignment import StudentBlockAssignment
from coursegrid.models.user import User, UserRole
from coursegrid.services import course_schedule
from coursegrid.services.block_generator import fixed_slot_picker
from coursegrid.services.course_schedule import (
    create_course_with_schedule,
    list_course_blocks,
    regenerate_course_schedule,
)
from coursegrid.services.enrollment import enroll_student


def make_user(db, email, role):
    user = User(name=email.split("@")[0], email=email, role=role)
    db.add(user)
    db.flush()
    return user


def test_course_creation_persists_generated_blocks(db_session):
    teacher = make_user(db_session, "prof@example.com", UserRole.teacher)

    course, blocks, result = create_course_with_schedule(
        db_session,
        code="CAL300",
        name="Calculus III",
        credits=4,
        capacity=25,
        teacher_id=teacher.id,
        slot_picker=fixed_slot_picker(4),
    )

    assert course.teacher_id == teacher.id
    assert [block.weekday for block in blocks] == [Weekday.monday, Weekday.tuesday, Weekday.wednesday]
    assert {(block.start_time, block.end_time) for block in blocks} == {(time(14, 0), time(16, 0))}
    assert [block.id for block in list_course_blocks(db_session, course.id)] == [block.id for block in blocks]
    assert result.total == 0


def test_duplicate_course_code_is_a_conflict(db_session):
    create_course_with_schedule(db_session, code="DUP100", name="First", credits=2, capacity=5)

    with pytest.raises(ConflictError):
        create_course_with_schedule(db_session, code="DUP100", name="Second", credits=2, capacity=5)


def test_course_teacher_must_be_a_teacher(db_session):
    student = make_user(db_session, "not-a-teacher@example.com", UserRole.student)

    with pytest.raises(ResourceNotFoundError):
        create_course_with_schedule(
            db_session, code="TCH100", name="Teaching", credits=3, capacity=5, teacher_id=student.id
        )


def test_invalid_credits_leave_no_course_behind(db_session):
    with pytest.raises(InvalidCreditsError):
        create_course_with_schedule(db_session, code="BAD000", name="Broken", credits=0, capacity=5)

    assert db_session.execute(select(func.count()).select_from(Course)).scalar_one() == 0


def test_regenerating_a_schedule_refans_enrolled_students(db_session):
    course, old_blocks, _ = create_course_with_schedule(
        db_session, code="NET210", name="Networks", credits=3, capacity=5, slot_picker=fixed_slot_picker(0)
    )
    students = [make_user(db_session, f"net{index}@example.com", UserRole.student) for index in range(2)]
    for student in students:
        enroll_student(db_session, student_id=student.id, course_id=course.id)
    old_ids = {block.id for block in old_blocks}

    _, new_blocks, result = regenerate_course_schedule(db_session, course.id, slot_picker=fixed_slot_picker(6))

    new_ids = {block.id for block in new_blocks}
    assert len(new_blocks) == 2
    assert new_ids.isdisjoint(old_ids)
    assert all(block.start_time == time(18, 0) for block in new_blocks)
    assert result.removed == 4
    assert result.created == 4
    stored_block_ids = set(db_session.execute(select(StudentBlockAssignment.block_id)).scalars())
    assert stored_block_ids == new_ids


def test_regenerating_unknown_course_raises_not_found(db_session):
    with pytest.raises(ResourceNotFoundError):
        regenerate_course_schedule(db_session, "no-such-course")


def test_configured_seed_makes_placement_repeatable(db_session, monkeypatch):
    monkeypatch.setattr(course_schedule, "get_settings", lambda: Settings(schedule_random_seed=11))

    _, first, _ = create_course_with_schedule(db_session, code="SEED01", name="Seeded A", credits=4, capacity=5)
    _, second, _ = create_course_with_schedule(db_session, code="SEED02", name="Seeded B", credits=4, capacity=5)

    assert [(block.weekday, block.start_time) for block in first] == [
        (block.weekday, block.start_time) for block in second
    ]
