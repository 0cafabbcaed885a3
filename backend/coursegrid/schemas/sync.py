from pydantic import BaseModel, Field


class SyncResultOut(BaseModel):
    created: int
    skipped: int
    errors: int = 0
    removed: int = 0
    total: int


class SyncRequest(BaseModel):
    student_id: str | None = Field(default=None, max_length=36)
    course_id: str | None = Field(default=None, max_length=36)


class SyncStatusOut(BaseModel):
    pairs_missing_assignments: int
    pairs_with_assignments: int
    missing_assignments: int
    stale_assignments: int
    in_sync: bool
    total_enrollments: int
    total_assignments: int
    total_blocks: int
    total_students: int


class OrphanReportOut(BaseModel):
    blocks: int
    enrollments: int
    assignments: int
    total: int


class CascadeReportOut(BaseModel):
    course_id: str
    assignments: int
    blocks: int
    enrollments: int
