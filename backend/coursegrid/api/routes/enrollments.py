from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursegrid.api.deps import get_db
from coursegrid.api.routes.courses import course_out
from coursegrid.schemas.enrollment import (
    EnrollmentCreate,
    EnrollmentOut,
    EnrollmentResultOut,
    StudentEnrollmentOut,
    WithdrawalOut,
)
from coursegrid.services.enrollment import (
    enroll_student,
    enrolled_counts,
    list_student_enrollments,
    withdraw_enrollment,
)

router = APIRouter()


@router.post("/enrollments", response_model=EnrollmentResultOut, status_code=status.HTTP_201_CREATED)
def create_enrollment(payload: EnrollmentCreate, db: Session = Depends(get_db)) -> EnrollmentResultOut:
    enrollment, result = enroll_student(db, student_id=payload.student_id, course_id=payload.course_id)
    db.commit()
    db.refresh(enrollment)
    return EnrollmentResultOut(enrollment=EnrollmentOut.model_validate(enrollment), sync=result.as_dict())


@router.delete("/enrollments/{enrollment_id}", response_model=WithdrawalOut)
def delete_enrollment(enrollment_id: str, db: Session = Depends(get_db)) -> WithdrawalOut:
    removed = withdraw_enrollment(db, enrollment_id)
    db.commit()
    return WithdrawalOut(enrollment_id=enrollment_id, assignments_removed=removed)


@router.get("/students/{student_id}/enrollments", response_model=list[StudentEnrollmentOut])
def list_enrollments(student_id: str, db: Session = Depends(get_db)) -> list[StudentEnrollmentOut]:
    counts = enrolled_counts(db)
    return [
        StudentEnrollmentOut(
            **EnrollmentOut.model_validate(enrollment).model_dump(),
            course=course_out(course, counts.get(course.id, 0)),
        )
        for enrollment, course in list_student_enrollments(db, student_id)
    ]
