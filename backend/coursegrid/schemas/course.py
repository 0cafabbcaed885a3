from pydantic import BaseModel, Field, field_validator

from coursegrid.schemas.schedule import ScheduleBlockOut
from coursegrid.schemas.sync import SyncResultOut


class CourseBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    credits: int = Field(ge=1, le=12)
    capacity: int = Field(ge=1, le=1000)
    teacher_id: str | None = Field(default=None, max_length=36)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("Course code cannot be empty")
        return code

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Course name cannot be empty")
        return trimmed


class CourseCreate(CourseBase):
    pass


class CourseOut(BaseModel):
    id: str
    code: str
    name: str
    credits: int
    capacity: int
    teacher_id: str | None = None
    enrolled_count: int = 0

    model_config = {"from_attributes": True}


class CourseDetailOut(BaseModel):
    course: CourseOut
    blocks: list[ScheduleBlockOut]


class CourseScheduleOut(CourseDetailOut):
    sync: SyncResultOut
