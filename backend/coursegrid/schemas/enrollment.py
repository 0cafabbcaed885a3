from datetime import datetime

from pydantic import BaseModel, Field

from coursegrid.schemas.course import CourseOut
from coursegrid.schemas.sync import SyncResultOut


class EnrollmentCreate(BaseModel):
    student_id: str = Field(min_length=1, max_length=36)
    course_id: str = Field(min_length=1, max_length=36)


class EnrollmentOut(BaseModel):
    id: str
    student_id: str
    course_id: str
    enrolled_at: datetime | None = None

    model_config = {"from_attributes": True}


class EnrollmentResultOut(BaseModel):
    enrollment: EnrollmentOut
    sync: SyncResultOut


class StudentEnrollmentOut(EnrollmentOut):
    course: CourseOut


class WithdrawalOut(BaseModel):
    enrollment_id: str
    assignments_removed: int
