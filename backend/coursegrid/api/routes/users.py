from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from coursegrid.api.deps import get_db
from coursegrid.models.user import User, UserRole
from coursegrid.schemas.user import UserCreate, UserOut

router = APIRouter()


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserOut:
    existing = db.execute(select(User).where(User.email == payload.email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    user = User(**payload.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _list_by_role(db: Session, role: UserRole) -> list[User]:
    return list(db.execute(select(User).where(User.role == role).order_by(User.name.asc())).scalars())


@router.get("/students", response_model=list[UserOut])
def list_students(db: Session = Depends(get_db)) -> list[UserOut]:
    return _list_by_role(db, UserRole.student)


@router.get("/teachers", response_model=list[UserOut])
def list_teachers(db: Session = Depends(get_db)) -> list[UserOut]:
    return _list_by_role(db, UserRole.teacher)
