from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursegrid.core.exceptions import ConflictError, ResourceNotFoundError
from coursegrid.models.course import Course
from coursegrid.models.enrollment import Enrollment
from coursegrid.models.user import User, UserRole
from coursegrid.services.orphan_cleanup import remove_pair_assignments
from coursegrid.services.schedule_sync import SyncResult, sync_one

logger = logging.getLogger(__name__)


def enrolled_count(db: Session, course_id: str) -> int:
    return db.execute(
        select(func.count()).select_from(Enrollment).where(Enrollment.course_id == course_id)
    ).scalar_one()


def enrolled_counts(db: Session) -> dict[str, int]:
    rows = db.execute(select(Enrollment.course_id, func.count()).group_by(Enrollment.course_id)).all()
    return {course_id: count for course_id, count in rows}


def get_user_with_role(db: Session, user_id: str, role: UserRole) -> User:
    user = db.get(User, user_id)
    if user is None or user.role != role:
        raise ResourceNotFoundError(role.value.capitalize(), user_id)
    return user


def enroll_student(db: Session, *, student_id: str, course_id: str) -> tuple[Enrollment, SyncResult]:
    get_user_with_role(db, student_id, UserRole.student)
    course = db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)

    # Pending enrollments from the caller count toward duplicates and capacity.
    db.flush()
    existing = db.execute(
        select(Enrollment.id).where(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
    ).first()
    if existing is not None:
        raise ConflictError("Student is already enrolled in this course")

    current = enrolled_count(db, course_id)
    if current >= course.capacity:
        raise ConflictError(
            "Course is full",
            details={"capacity": course.capacity, "enrolled_count": current},
        )

    enrollment = Enrollment(student_id=student_id, course_id=course_id)
    try:
        with db.begin_nested():
            db.add(enrollment)
            db.flush()
    except IntegrityError as exc:
        raise ConflictError("Student is already enrolled in this course") from exc

    result = sync_one(db, student_id, course_id)
    logger.info(
        "Enrolled student %s in course %s (%d/%d), %d block(s) assigned",
        student_id,
        course_id,
        current + 1,
        course.capacity,
        result.created,
    )
    return enrollment, result


def withdraw_enrollment(db: Session, enrollment_id: str) -> int:
    enrollment = db.get(Enrollment, enrollment_id)
    if enrollment is None:
        raise ResourceNotFoundError("Enrollment", enrollment_id)
    removed = remove_pair_assignments(db, enrollment.student_id, enrollment.course_id)
    db.delete(enrollment)
    db.flush()
    return removed


def list_student_enrollments(db: Session, student_id: str) -> list[tuple[Enrollment, Course]]:
    get_user_with_role(db, student_id, UserRole.student)
    rows = db.execute(
        select(Enrollment, Course)
        .join(Course, Course.id == Enrollment.course_id)
        .where(Enrollment.student_id == student_id)
        .order_by(Course.code.asc())
    ).all()
    return [(row.Enrollment, row.Course) for row in rows]


def list_course_students(db: Session, course_id: str) -> list[User]:
    if db.get(Course, course_id) is None:
        raise ResourceNotFoundError("Course", course_id)
    return list(
        db.execute(
            select(User)
            .join(Enrollment, Enrollment.student_id == User.id)
            .where(Enrollment.course_id == course_id)
            .order_by(User.name.asc())
        ).scalars()
    )
