import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database.db import get_db
from app.schemas.base import MessageOut
from app.schemas.registrations import RegisterRequest, RegistrationCreated
from app.services.registrations import cancel_registration, register_user_for_event

router = APIRouter(prefix="/events", tags=["registrations"])


@router.post("/{event_id}/register", response_model=RegistrationCreated, status_code=201)
def register(event_id: uuid.UUID, payload: RegisterRequest, db: Session = Depends(get_db)):
    registration = register_user_for_event(db, event_id=event_id, identity=payload.identity())
    return {"message": "Successfully registered for event", "registration": registration}


@router.delete("/{event_id}/register/{user_id}", response_model=MessageOut)
def cancel(event_id: uuid.UUID, user_id: uuid.UUID, db: Session = Depends(get_db)):
    cancel_registration(db, event_id=event_id, user_id=user_id)
    return {"message": "Registration cancelled successfully"}
