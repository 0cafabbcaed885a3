from __future__ import annotations

from dataclasses import asdict, dataclass
import logging

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from coursegrid.core.exceptions import ResourceNotFoundError
from coursegrid.models.course import Course
from coursegrid.models.enrollment import Enrollment
from coursegrid.models.schedule_block import ScheduleBlock
from coursegrid.models.student_block_assignment import StudentBlockAssignment

logger = logging.getLogger(__name__)


@dataclass
class CascadeReport:
    course_id: str
    assignments: int = 0
    blocks: int = 0
    enrollments: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class OrphanReport:
    blocks: int = 0
    enrollments: int = 0
    assignments: int = 0

    @property
    def total(self) -> int:
        return self.blocks + self.enrollments + self.assignments

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["total"] = self.total
        return payload


def _bulk_delete(db: Session, statement) -> int:
    return db.execute(statement.execution_options(synchronize_session=False)).rowcount


def _course_missing(column):
    return ~select(Course.id).where(Course.id == column).exists()


def _block_missing(column):
    return ~select(ScheduleBlock.id).where(ScheduleBlock.id == column).exists()


def _course_block_ids(course_id: str):
    return select(ScheduleBlock.id).where(ScheduleBlock.course_id == course_id)


def remove_pair_assignments(db: Session, student_id: str, course_id: str) -> int:
    removed = _bulk_delete(
        db,
        delete(StudentBlockAssignment).where(
            StudentBlockAssignment.student_id == student_id,
            or_(
                StudentBlockAssignment.course_id == course_id,
                StudentBlockAssignment.block_id.in_(_course_block_ids(course_id)),
            ),
        ),
    )
    logger.info("Removed %d assignment(s) for student %s in course %s", removed, student_id, course_id)
    return removed


def delete_block(db: Session, block_id: str) -> int:
    block = db.get(ScheduleBlock, block_id)
    if block is None:
        raise ResourceNotFoundError("Schedule block", block_id)
    removed = _bulk_delete(db, delete(StudentBlockAssignment).where(StudentBlockAssignment.block_id == block_id))
    db.delete(block)
    db.flush()
    return removed


def delete_course_blocks(db: Session, course_id: str) -> tuple[int, int]:
    """Delete a course's blocks and every assignment pointing at them. Returns (assignments, blocks)."""
    assignments = _bulk_delete(
        db,
        delete(StudentBlockAssignment).where(
            or_(
                StudentBlockAssignment.course_id == course_id,
                StudentBlockAssignment.block_id.in_(_course_block_ids(course_id)),
            )
        ),
    )
    blocks = _bulk_delete(db, delete(ScheduleBlock).where(ScheduleBlock.course_id == course_id))
    return assignments, blocks


def delete_course_cascade(db: Session, course_id: str) -> CascadeReport:
    """Remove a course and everything that references it.

    Order matters: assignments, then blocks, then enrollments, then the course,
    so no step leaves rows pointing at an already-deleted parent.
    """
    course = db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)

    report = CascadeReport(course_id=course_id)
    report.assignments, report.blocks = delete_course_blocks(db, course_id)
    report.enrollments = _bulk_delete(db, delete(Enrollment).where(Enrollment.course_id == course_id))
    db.delete(course)
    db.flush()

    logger.info(
        "Deleted course %s: %d assignment(s), %d block(s), %d enrollment(s)",
        course_id,
        report.assignments,
        report.blocks,
        report.enrollments,
    )
    return report


def _orphan_assignment_criteria():
    orphan_block_ids = select(ScheduleBlock.id).where(_course_missing(ScheduleBlock.course_id))
    return or_(
        _block_missing(StudentBlockAssignment.block_id),
        _course_missing(StudentBlockAssignment.course_id),
        StudentBlockAssignment.block_id.in_(orphan_block_ids),
    )


def find_orphans(db: Session) -> OrphanReport:
    def count(model, criteria) -> int:
        return db.execute(select(func.count()).select_from(model).where(criteria)).scalar_one()

    return OrphanReport(
        blocks=count(ScheduleBlock, _course_missing(ScheduleBlock.course_id)),
        enrollments=count(Enrollment, _course_missing(Enrollment.course_id)),
        assignments=count(StudentBlockAssignment, _orphan_assignment_criteria()),
    )


def cleanup_orphans(db: Session) -> OrphanReport:
    report = OrphanReport()
    report.assignments = _bulk_delete(db, delete(StudentBlockAssignment).where(_orphan_assignment_criteria()))
    report.blocks = _bulk_delete(db, delete(ScheduleBlock).where(_course_missing(ScheduleBlock.course_id)))
    report.enrollments = _bulk_delete(db, delete(Enrollment).where(_course_missing(Enrollment.course_id)))
    logger.info(
        "Orphan cleanup removed %d assignment(s), %d block(s), %d enrollment(s)",
        report.assignments,
        report.blocks,
        report.enrollments,
    )
    return report
