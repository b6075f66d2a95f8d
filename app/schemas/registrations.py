import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from pydantic import ConfigDict, EmailStr, Field, field_validator

from app.core.exceptions import ValidationError
from app.schemas.base import CamelModel
from app.schemas.users import UserSummary, normalize_email


@dataclass(frozen=True)
class ByExistingId:
    user_id: uuid.UUID


@dataclass(frozen=True)
class ByNameEmail:
    name: str
    email: str


UserIdentity = Union[ByExistingId, ByNameEmail]


class RegisterRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: Optional[uuid.UUID] = None
    user_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    user_email: Optional[EmailStr] = None

    @field_validator("user_email", mode="after")
    @classmethod
    def normalize(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else None

    def identity(self) -> UserIdentity:
        """Pick the identification mode; userId wins when both are sent."""
        if self.user_id is not None:
            return ByExistingId(self.user_id)
        if self.user_name and self.user_email:
            return ByNameEmail(name=self.user_name, email=self.user_email)
        raise ValidationError("Either userId or both userName and userEmail are required")


class RegistrationEvent(CamelModel):
    id: uuid.UUID
    title: str
    date_time: datetime
    location: str


class RegistrationOut(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    event_id: uuid.UUID
    created_at: datetime
    user: UserSummary
    event: RegistrationEvent


class RegistrationCreated(CamelModel):
    message: str
    registration: RegistrationOut
