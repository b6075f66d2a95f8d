import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.crud import events as event_store
from app.database.types import utcnow
from app.models.events import MAX_CAPACITY, Event
from app.schemas.events import EventCreate

logger = logging.getLogger(__name__)


def create_event(db: Session, payload: EventCreate) -> Event:
    # Also enforced for callers that skip EventCreate validation
    if payload.capacity > MAX_CAPACITY:
        raise ValidationError(f"Capacity cannot exceed {MAX_CAPACITY}")
    if payload.capacity < 1:
        raise ValidationError("Capacity must be at least 1")

    event = event_store.create_event(
        db,
        title=payload.title,
        date_time=payload.date_time,
        location=payload.location,
        capacity=payload.capacity,
    )
    db.commit()
    logger.info(f"Created event {event.id} with capacity {event.capacity}")
    return event


def get_event(db: Session, event_id: uuid.UUID) -> Event:
    event = event_store.get_event(db, event_id, with_registrations=True)
    if not event:
        raise NotFoundError("Event not found")
    return event


def get_event_detail(db: Session, event_id: uuid.UUID) -> dict:
    event = get_event(db, event_id)
    registered_users = [registration.user for registration in event.registrations]
    return {
        "id": event.id,
        "title": event.title,
        "date_time": event.date_time,
        "location": event.location,
        "capacity": event.capacity,
        "registered_users": registered_users,
        "total_registrations": len(registered_users),
    }


def _summaries(rows: list[tuple[Event, int]]) -> dict:
    events = [
        {
            "id": event.id,
            "title": event.title,
            "date_time": event.date_time,
            "location": event.location,
            "capacity": event.capacity,
            "registrations": count,
            "available_spots": event.capacity - count,
        }
        for event, count in rows
    ]
    return {"count": len(events), "events": events}


def get_upcoming_events(db: Session) -> dict:
    return _summaries(event_store.list_upcoming_events(db, utcnow()))


def get_all_events(db: Session) -> dict:
    return _summaries(event_store.list_events(db))


def _percentage(part: int, whole: int) -> float:
    # Half-up to two places: 1 of 800 is 0.13
    value = Decimal(part * 100) / Decimal(whole)
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def get_event_stats(db: Session, event_id: uuid.UUID) -> dict:
    event = get_event(db, event_id)

    total_registrations = len(event.registrations)
    remaining_capacity = event.capacity - total_registrations

    return {
        "event_id": event.id,
        "event_title": event.title,
        "capacity": event.capacity,
        "total_registrations": total_registrations,
        "remaining_capacity": remaining_capacity,
        "percentage_used": _percentage(total_registrations, event.capacity),
        "is_full": remaining_capacity == 0,
    }
