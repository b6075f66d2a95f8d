import uuid
from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field, field_validator

from app.schemas.base import CamelModel


def normalize_email(value: str) -> str:
    return value.strip().lower()


class UserCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr

    @field_validator("email", mode="after")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class UserSummary(CamelModel):
    id: uuid.UUID
    name: str
    email: str


class UserOut(UserSummary):
    created_at: datetime
