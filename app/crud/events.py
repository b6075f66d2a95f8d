import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.models.events import Event
from app.models.registrations import Registration


def create_event(db: Session, *, title: str, date_time: datetime, location: str, capacity: int) -> Event:
    event = Event(title=title, date_time=date_time, location=location, capacity=capacity)
    db.add(event)
    db.flush()
    return event


def get_event(db: Session, event_id: uuid.UUID, *, with_registrations: bool = False) -> Optional[Event]:
    """Load an event, optionally with its registrations and their users."""
    if not with_registrations:
        return db.get(Event, event_id)

    stmt = (
        select(Event)
        .where(Event.id == event_id)
        .options(selectinload(Event.registrations).selectinload(Registration.user))
    )
    return db.scalar(stmt)


def count_registrations(db: Session, event_id: uuid.UUID) -> int:
    count = db.scalar(
        select(func.count(Registration.id)).where(Registration.event_id == event_id)
    )
    return int(count or 0)


def _events_with_counts():
    registration_count = func.count(Registration.id).label("registration_count")
    return (
        select(Event, registration_count)
        .outerjoin(Registration, Registration.event_id == Event.id)
        .group_by(Event.id)
    )


def list_upcoming_events(db: Session, now: datetime) -> list[tuple[Event, int]]:
    """Events strictly after ``now``, soonest first, ties broken by location."""
    stmt = (
        _events_with_counts()
        .where(Event.date_time > now)
        .order_by(Event.date_time.asc(), Event.location.asc())
    )
    return [(event, int(count)) for event, count in db.execute(stmt).all()]


def list_events(db: Session) -> list[tuple[Event, int]]:
    stmt = _events_with_counts().order_by(Event.date_time.asc(), Event.location.asc())
    return [(event, int(count)) for event, count in db.execute(stmt).all()]
