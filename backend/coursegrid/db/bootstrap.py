from __future__ import annotations

import logging

from sqlalchemy import inspect

import coursegrid.models  # noqa: F401
from coursegrid.db.base import Base
from coursegrid.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "email", "role"},
    "courses": {"id", "code", "credits", "capacity", "teacher_id"},
    "schedule_blocks": {"id", "course_id", "weekday", "start_time", "end_time"},
    "enrollments": {"id", "student_id", "course_id"},
    "student_block_assignments": {"id", "student_id", "course_id", "block_id"},
}


def missing_schema(connection) -> list[str]:
    """Required tables and ``table.column`` pairs absent from the connected database."""
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing: list[str] = []
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing.extend(f"{table_name}.{column_name}" for column_name in sorted(required - existing))
    return missing


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing = missing_schema(connection)
    if missing:
        raise RuntimeError(f"Missing required schema: {', '.join(missing)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
