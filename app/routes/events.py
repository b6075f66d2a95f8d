import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database.db import get_db
from app.schemas.events import EventCreate, EventCreated, EventDetail, EventList, EventStatsOut
from app.services import events as event_service

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventCreated, status_code=201)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    event = event_service.create_event(db, payload)
    return {"message": "Event created successfully", "event": event}


@router.get("", response_model=EventList)
def list_events(db: Session = Depends(get_db)):
    return event_service.get_all_events(db)


# Declared before /{event_id} so "upcoming" is not parsed as an id
@router.get("/upcoming", response_model=EventList)
def upcoming_events(db: Session = Depends(get_db)):
    return event_service.get_upcoming_events(db)


@router.get("/{event_id}", response_model=EventDetail)
def get_event(event_id: uuid.UUID, db: Session = Depends(get_db)):
    return event_service.get_event_detail(db, event_id)


@router.get("/{event_id}/stats", response_model=EventStatsOut)
def event_stats(event_id: uuid.UUID, db: Session = Depends(get_db)):
    return event_service.get_event_stats(db, event_id)
