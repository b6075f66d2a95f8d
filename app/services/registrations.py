import contextlib
import logging
import uuid
from typing import Iterator

import redis
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from app.core.redis_config import get_redis_client
from app.crud import events as event_store
from app.crud import registrations as registration_store
from app.crud import users as user_store
from app.database.types import utcnow
from app.models.registrations import Registration
from app.models.users import User
from app.schemas.registrations import ByExistingId, ByNameEmail, UserIdentity

logger = logging.getLogger(__name__)


class EventBusyError(ConflictError):
    status_code = 409
    default_detail = "Event is busy, please try again."


@contextlib.contextmanager
def event_lock(event_id: uuid.UUID) -> Iterator[None]:
    """
    Hold a Redis lock for the event so that only one registration at a time
    runs the count-then-insert sequence.
    """
    if not settings.REGISTRATION_LOCK_ENABLED:
        yield
        return

    redis_client = get_redis_client()
    lock = redis_client.lock(
        f"event_lock:{event_id}",
        timeout=settings.REGISTRATION_LOCK_TIMEOUT,
        blocking_timeout=settings.REGISTRATION_LOCK_BLOCKING_TIMEOUT,
    )

    try:
        acquired = lock.acquire(blocking=True)
    except redis.exceptions.LockError as e:  # type: ignore
        raise EventBusyError() from e
    if not acquired:
        raise EventBusyError()

    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockNotOwnedError:
            # Lock expired while held; the unique constraint still guards duplicates
            logger.warning(f"Registration lock for event {event_id} expired before release")


def _resolve_user(db: Session, identity: UserIdentity) -> User:
    if isinstance(identity, ByExistingId):
        user = user_store.get_user(db, identity.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    if isinstance(identity, ByNameEmail):
        user = user_store.get_user_by_email(db, identity.email)
        if user:
            return user
        try:
            user = user_store.create_user(db, name=identity.name, email=identity.email)
        except ConflictError:
            # Another request created this email after our lookup
            user = user_store.get_user_by_email(db, identity.email)
            if not user:
                raise
            return user
        logger.info(f"Created user {user.id} during registration")
        return user

    raise ValidationError("Either userId or both userName and userEmail are required")


def register_user_for_event(db: Session, *, event_id: uuid.UUID, identity: UserIdentity) -> Registration:
    """
    Register a user for an event.

    The user is either looked up by id or found/created by email. Past
    events, duplicate registrations and full events are rejected.
    """
    with event_lock(event_id):
        try:
            registration = _register_locked(db, event_id, identity)
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info(f"Registered user {registration.user_id} for event {event_id}")
    return registration


def _register_locked(db: Session, event_id: uuid.UUID, identity: UserIdentity) -> Registration:
    event = event_store.get_event(db, event_id)
    if not event:
        raise NotFoundError("Event not found")

    if event.date_time < utcnow():
        raise InvalidStateError("Cannot register for past events")

    user = _resolve_user(db, identity)

    existing = registration_store.get_registration(db, user_id=user.id, event_id=event.id)
    if existing:
        raise ConflictError("User is already registered for this event")

    current = event_store.count_registrations(db, event.id)
    if current >= event.capacity:
        raise ConflictError("Event is at full capacity")

    registration = registration_store.create_registration(db, user_id=user.id, event_id=event.id)
    return registration


def cancel_registration(db: Session, *, event_id: uuid.UUID, user_id: uuid.UUID) -> None:
    try:
        if not event_store.get_event(db, event_id):
            raise NotFoundError("Event not found")

        if not user_store.get_user(db, user_id):
            raise NotFoundError("User not found")

        if not registration_store.get_registration(db, user_id=user_id, event_id=event_id):
            raise NotFoundError("Registration not found. User is not registered for this event")

        registration_store.delete_registration(db, user_id=user_id, event_id=event_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Cancelled registration of user {user_id} for event {event_id}")
