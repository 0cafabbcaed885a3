"""Keep ``student_block_assignments`` equal to enrollments joined with course blocks.

Every entry point reduces to the same reconciliation: compute the desired
``(student, course, block)`` set from enrollments and blocks, delete stored rows
outside it, then fan each enrollment pair out over its course's blocks with an
insert-if-absent. Inserts lean on the ``(student_id, block_id)`` unique
constraint, so concurrent syncs of the same pair resolve to a skipped row rather
than a duplicate.

Functions flush but never commit; the caller owns the transaction.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
import logging
import uuid

from sqlalchemy import delete, exists, func, or_, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from coursegrid.core.exceptions import StorageUnavailableError, SyncValidationError
from coursegrid.models.enrollment import Enrollment
from coursegrid.models.schedule_block import ScheduleBlock
from coursegrid.models.student_block_assignment import StudentBlockAssignment
from coursegrid.models.user import User, UserRole

logger = logging.getLogger(__name__)

# Connection-level failures abort the whole operation instead of being counted per pair.
FATAL_STORAGE_ERRORS = (OperationalError, InterfaceError)

AssignmentKey = tuple[str, str, str]


@dataclass
class SyncResult:
    created: int = 0
    skipped: int = 0
    errors: int = 0
    removed: int = 0

    @property
    def total(self) -> int:
        return self.created + self.skipped

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["total"] = self.total
        return payload


def _require_id(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise SyncValidationError(f"{field} is required", details={"field": field})
    return str(value).strip()


def _insert_if_absent(db: Session, *, student_id: str, course_id: str, block_id: str) -> bool:
    table = StudentBlockAssignment.__table__
    values = {
        "id": str(uuid.uuid4()),
        "student_id": student_id,
        "course_id": course_id,
        "block_id": block_id,
    }
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        statement = postgresql_insert(table).values(**values)
    elif dialect == "sqlite":
        statement = sqlite_insert(table).values(**values)
    else:
        already_present = db.execute(
            select(StudentBlockAssignment.id).where(
                StudentBlockAssignment.student_id == student_id,
                StudentBlockAssignment.block_id == block_id,
            )
        ).first()
        if already_present is not None:
            return False
        db.add(StudentBlockAssignment(**values))
        db.flush()
        return True

    statement = statement.on_conflict_do_nothing(index_elements=["student_id", "block_id"])
    return db.execute(statement).rowcount == 1


def _fan_out_pair(db: Session, student_id: str, course_id: str, block_ids: list[str]) -> tuple[int, int]:
    created = 0
    skipped = 0
    for block_id in block_ids:
        if _insert_if_absent(db, student_id=student_id, course_id=course_id, block_id=block_id):
            created += 1
        else:
            skipped += 1
    return created, skipped


def _desired_assignments(
    db: Session, *, student_id: str | None = None, course_id: str | None = None
) -> set[AssignmentKey]:
    query = select(Enrollment.student_id, Enrollment.course_id, ScheduleBlock.id).join(
        ScheduleBlock, ScheduleBlock.course_id == Enrollment.course_id
    )
    if student_id is not None:
        query = query.where(Enrollment.student_id == student_id)
    if course_id is not None:
        query = query.where(Enrollment.course_id == course_id)
    return {tuple(row) for row in db.execute(query).all()}


def _in_course_scope(course_id: str):
    # Rows on the course's blocks belong to its scope even when tagged with another course.
    course_block_ids = select(ScheduleBlock.id).where(ScheduleBlock.course_id == course_id)
    return or_(
        StudentBlockAssignment.course_id == course_id,
        StudentBlockAssignment.block_id.in_(course_block_ids),
    )


def _stored_assignments(
    db: Session, *, student_id: str | None = None, course_id: str | None = None
) -> dict[AssignmentKey, str]:
    query = select(
        StudentBlockAssignment.id,
        StudentBlockAssignment.student_id,
        StudentBlockAssignment.course_id,
        StudentBlockAssignment.block_id,
    )
    if student_id is not None:
        query = query.where(StudentBlockAssignment.student_id == student_id)
    if course_id is not None:
        query = query.where(_in_course_scope(course_id))
    return {(row.student_id, row.course_id, row.block_id): row.id for row in db.execute(query).all()}


def _remove_stale(db: Session, *, student_id: str | None = None, course_id: str | None = None) -> int:
    desired = _desired_assignments(db, student_id=student_id, course_id=course_id)
    stored = _stored_assignments(db, student_id=student_id, course_id=course_id)
    stale_ids = [row_id for key, row_id in stored.items() if key not in desired]
    if not stale_ids:
        return 0
    db.execute(
        delete(StudentBlockAssignment)
        .where(StudentBlockAssignment.id.in_(stale_ids))
        .execution_options(synchronize_session=False)
    )
    return len(stale_ids)


def _enrollment_pairs(
    db: Session, *, student_id: str | None = None, course_id: str | None = None
) -> list[tuple[str, str]]:
    query = select(Enrollment.student_id, Enrollment.course_id).distinct()
    if student_id is not None:
        query = query.where(Enrollment.student_id == student_id)
    if course_id is not None:
        query = query.where(Enrollment.course_id == course_id)
    query = query.order_by(Enrollment.course_id, Enrollment.student_id)
    return [(row.student_id, row.course_id) for row in db.execute(query).all()]


def _block_ids_by_course(db: Session, course_ids: set[str]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = defaultdict(list)
    if not course_ids:
        return grouped
    rows = db.execute(
        select(ScheduleBlock.course_id, ScheduleBlock.id)
        .where(ScheduleBlock.course_id.in_(course_ids))
        .order_by(ScheduleBlock.course_id, ScheduleBlock.id)
    ).all()
    for row in rows:
        grouped[row.course_id].append(row.id)
    return grouped


def _reconcile(
    db: Session,
    *,
    operation: str,
    student_id: str | None = None,
    course_id: str | None = None,
) -> SyncResult:
    result = SyncResult()
    try:
        result.removed = _remove_stale(db, student_id=student_id, course_id=course_id)
        pairs = _enrollment_pairs(db, student_id=student_id, course_id=course_id)
        block_ids = _block_ids_by_course(db, {pair_course for _, pair_course in pairs})
    except FATAL_STORAGE_ERRORS as exc:
        raise StorageUnavailableError(operation) from exc

    for pair_student, pair_course in pairs:
        try:
            with db.begin_nested():
                created, skipped = _fan_out_pair(db, pair_student, pair_course, block_ids[pair_course])
        except FATAL_STORAGE_ERRORS as exc:
            raise StorageUnavailableError(operation) from exc
        except SQLAlchemyError:
            logger.exception("Failed to sync schedule for student %s in course %s", pair_student, pair_course)
            result.errors += 1
            continue
        result.created += created
        result.skipped += skipped

    logger.info(
        "%s: %d enrollment pair(s), %d created, %d skipped, %d removed, %d error(s)",
        operation,
        len(pairs),
        result.created,
        result.skipped,
        result.removed,
        result.errors,
    )
    return result


def sync_one(db: Session, student_id: str | None, course_id: str | None) -> SyncResult:
    """Fan one enrollment out over its course's blocks. Existing rows are left untouched."""
    student_id = _require_id(student_id, "student_id")
    course_id = _require_id(course_id, "course_id")
    try:
        enrolled = db.execute(
            select(Enrollment.id).where(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
        ).first()
        if enrolled is None:
            logger.info("sync_one: student %s is not enrolled in course %s", student_id, course_id)
            return SyncResult()
        block_ids = list(
            db.execute(
                select(ScheduleBlock.id).where(ScheduleBlock.course_id == course_id).order_by(ScheduleBlock.id)
            ).scalars()
        )
        created, skipped = _fan_out_pair(db, student_id, course_id, block_ids)
    except FATAL_STORAGE_ERRORS as exc:
        raise StorageUnavailableError("sync_one") from exc
    return SyncResult(created=created, skipped=skipped)


def sync_all(db: Session) -> SyncResult:
    return _reconcile(db, operation="sync_all")


def sync_for_course(db: Session, course_id: str | None) -> SyncResult:
    course_id = _require_id(course_id, "course_id")
    return _reconcile(db, operation="sync_for_course", course_id=course_id)


def sync_for_student(db: Session, student_id: str | None) -> SyncResult:
    student_id = _require_id(student_id, "student_id")
    return _reconcile(db, operation="sync_for_student", student_id=student_id)


def sync_scoped(db: Session, *, student_id: str | None = None, course_id: str | None = None) -> SyncResult:
    has_student = student_id is not None and bool(str(student_id).strip())
    has_course = course_id is not None and bool(str(course_id).strip())
    if has_student and has_course:
        return sync_one(db, student_id, course_id)
    if has_student:
        return sync_for_student(db, student_id)
    if has_course:
        return sync_for_course(db, course_id)
    raise SyncValidationError("student_id or course_id is required")


def sync_status(db: Session) -> dict:
    try:
        desired = _desired_assignments(db)
        stored = set(_stored_assignments(db))
        pairs_total = db.execute(select(func.count()).select_from(Enrollment)).scalar_one()
        pairs_missing = db.execute(
            select(func.count())
            .select_from(Enrollment)
            .where(
                ~exists().where(
                    StudentBlockAssignment.student_id == Enrollment.student_id,
                    StudentBlockAssignment.course_id == Enrollment.course_id,
                )
            )
        ).scalar_one()
        total_blocks = db.execute(select(func.count()).select_from(ScheduleBlock)).scalar_one()
        total_students = db.execute(
            select(func.count()).select_from(User).where(User.role == UserRole.student)
        ).scalar_one()
    except FATAL_STORAGE_ERRORS as exc:
        raise StorageUnavailableError("sync_status") from exc

    missing = len(desired - stored)
    stale = len(stored - desired)
    return {
        "pairs_missing_assignments": pairs_missing,
        "pairs_with_assignments": pairs_total - pairs_missing,
        "missing_assignments": missing,
        "stale_assignments": stale,
        "in_sync": missing == 0 and stale == 0,
        "total_enrollments": pairs_total,
        "total_assignments": len(stored),
        "total_blocks": total_blocks,
        "total_students": total_students,
    }
