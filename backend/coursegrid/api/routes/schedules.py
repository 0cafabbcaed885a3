from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursegrid.api.deps import get_db
from coursegrid.schemas.schedule import StudentScheduleOut, TeacherScheduleOut
from coursegrid.services.schedule_views import group_by_weekday, student_schedule, teacher_schedule

router = APIRouter()


@router.get("/students/{student_id}/schedule", response_model=StudentScheduleOut)
def get_student_schedule(student_id: str, resync: bool = False, db: Session = Depends(get_db)) -> StudentScheduleOut:
    entries = student_schedule(db, student_id, resync=resync)
    if resync:
        db.commit()
    return {"student_id": student_id, "entries": entries, "by_weekday": group_by_weekday(entries)}


@router.get("/teachers/{teacher_id}/schedule", response_model=TeacherScheduleOut)
def get_teacher_schedule(teacher_id: str, db: Session = Depends(get_db)) -> TeacherScheduleOut:
    entries = teacher_schedule(db, teacher_id)
    return {"teacher_id": teacher_id, "entries": entries, "by_weekday": group_by_weekday(entries)}
