from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from coursegrid.models.user import UserRole


class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    role: UserRole

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Name cannot be empty")
        return trimmed

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserCreate(UserBase):
    pass


class UserOut(UserBase):
    id: str
    is_active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
