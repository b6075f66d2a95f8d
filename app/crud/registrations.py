import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.database.errors import translate_store_error
from app.models.registrations import Registration


def get_registration(db: Session, *, user_id: uuid.UUID, event_id: uuid.UUID) -> Optional[Registration]:
    return db.scalar(
        select(Registration).where(
            Registration.user_id == user_id,
            Registration.event_id == event_id,
        )
    )


def create_registration(db: Session, *, user_id: uuid.UUID, event_id: uuid.UUID) -> Registration:
    """
    Insert the join row. A concurrent insert for the same pair trips
    uq_registrations_user_event and comes back as ConflictError.
    """
    registration = Registration(user_id=user_id, event_id=event_id)
    try:
        with db.begin_nested():
            db.add(registration)
    except IntegrityError as e:
        raise translate_store_error(e) from e
    db.refresh(registration)
    return registration


def delete_registration(db: Session, *, user_id: uuid.UUID, event_id: uuid.UUID) -> None:
    res = db.execute(
        delete(Registration).where(
            Registration.user_id == user_id,
            Registration.event_id == event_id,
        )
    )
    # Zero rows means a concurrent cancel got there first
    if res.rowcount != 1:  # type: ignore
        raise NotFoundError("Registration not found")
