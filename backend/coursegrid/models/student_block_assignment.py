import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from coursegrid.db.base import Base


class StudentBlockAssignment(Base):
    """Materialized (student, course, block) fan-out of enrollments over course blocks."""

    __tablename__ = "student_block_assignments"
    __table_args__ = (UniqueConstraint("student_id", "block_id", name="uq_student_block_assignments_student_block"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    block_id: Mapped[str] = mapped_column(String(36), ForeignKey("schedule_blocks.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
