from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from coursegrid.api.deps import get_db
from coursegrid.core.exceptions import ResourceNotFoundError
from coursegrid.models.course import Course
from coursegrid.schemas.course import CourseCreate, CourseDetailOut, CourseOut, CourseScheduleOut
from coursegrid.schemas.schedule import ScheduleBlockOut
from coursegrid.schemas.sync import CascadeReportOut
from coursegrid.schemas.user import UserOut
from coursegrid.services.course_schedule import (
    create_course_with_schedule,
    list_course_blocks,
    regenerate_course_schedule,
)
from coursegrid.services.enrollment import enrolled_count, enrolled_counts, list_course_students
from coursegrid.services.orphan_cleanup import delete_block, delete_course_cascade

router = APIRouter()


def course_out(course: Course, count: int) -> CourseOut:
    return CourseOut.model_validate(course).model_copy(update={"enrolled_count": count})


@router.get("/", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db)) -> list[CourseOut]:
    counts = enrolled_counts(db)
    courses = db.execute(select(Course).order_by(Course.code.asc())).scalars()
    return [course_out(course, counts.get(course.id, 0)) for course in courses]


@router.post("/", response_model=CourseScheduleOut, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate, db: Session = Depends(get_db)) -> CourseScheduleOut:
    course, blocks, result = create_course_with_schedule(db, **payload.model_dump())
    db.commit()
    db.refresh(course)
    return CourseScheduleOut(
        course=course_out(course, 0),
        blocks=[ScheduleBlockOut.model_validate(block) for block in blocks],
        sync=result.as_dict(),
    )


@router.get("/{course_id}", response_model=CourseDetailOut)
def get_course(course_id: str, db: Session = Depends(get_db)) -> CourseDetailOut:
    course = db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)
    return CourseDetailOut(
        course=course_out(course, enrolled_count(db, course_id)),
        blocks=[ScheduleBlockOut.model_validate(block) for block in list_course_blocks(db, course_id)],
    )


@router.delete("/{course_id}", response_model=CascadeReportOut)
def delete_course(course_id: str, db: Session = Depends(get_db)) -> CascadeReportOut:
    report = delete_course_cascade(db, course_id)
    db.commit()
    return report.as_dict()


@router.post("/{course_id}/schedule", response_model=CourseScheduleOut)
def regenerate_schedule(course_id: str, db: Session = Depends(get_db)) -> CourseScheduleOut:
    course, blocks, result = regenerate_course_schedule(db, course_id)
    db.commit()
    return CourseScheduleOut(
        course=course_out(course, enrolled_count(db, course_id)),
        blocks=[ScheduleBlockOut.model_validate(block) for block in blocks],
        sync=result.as_dict(),
    )


@router.get("/{course_id}/blocks", response_model=list[ScheduleBlockOut])
def list_blocks(course_id: str, db: Session = Depends(get_db)) -> list[ScheduleBlockOut]:
    return list_course_blocks(db, course_id)


@router.delete("/{course_id}/blocks/{block_id}")
def remove_block(course_id: str, block_id: str, db: Session = Depends(get_db)) -> dict:
    block_ids = {block.id for block in list_course_blocks(db, course_id)}
    if block_id not in block_ids:
        raise ResourceNotFoundError("Schedule block", block_id)
    removed = delete_block(db, block_id)
    db.commit()
    return {"success": True, "assignments_removed": removed}


@router.get("/{course_id}/students", response_model=list[UserOut])
def list_students(course_id: str, db: Session = Depends(get_db)) -> list[UserOut]:
    return list_course_students(db, course_id)
