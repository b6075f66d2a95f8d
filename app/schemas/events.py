import uuid
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from app.database.types import as_utc
from app.models.events import MAX_CAPACITY
from app.schemas.base import CamelModel
from app.schemas.users import UserSummary


# ---------- Event ----------
class EventCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3, max_length=200)
    date_time: datetime
    location: str = Field(min_length=3, max_length=200)
    capacity: int = Field(ge=1, le=MAX_CAPACITY)

    @field_validator("date_time", mode="before")
    @classmethod
    def require_iso_string(cls, v):
        # Epoch numbers, bare or quoted, would otherwise pass lax datetime parsing
        if isinstance(v, datetime):
            return v
        if isinstance(v, str):
            try:
                float(v)
            except ValueError:
                return v
        raise ValueError("dateTime must be an ISO 8601 string")

    @field_validator("date_time", mode="after")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class EventOut(CamelModel):
    id: uuid.UUID
    title: str
    date_time: datetime
    location: str
    capacity: int
    created_at: datetime


class EventCreated(CamelModel):
    message: str
    event: EventOut


class EventDetail(CamelModel):
    id: uuid.UUID
    title: str
    date_time: datetime
    location: str
    capacity: int
    registered_users: list[UserSummary]
    total_registrations: int


class EventSummary(CamelModel):
    id: uuid.UUID
    title: str
    date_time: datetime
    location: str
    capacity: int
    registrations: int
    available_spots: int


class EventList(CamelModel):
    count: int
    events: list[EventSummary]


class EventStatsOut(CamelModel):
    event_id: uuid.UUID
    event_title: str
    capacity: int
    total_registrations: int
    remaining_capacity: int
    percentage_used: float
    is_full: bool
