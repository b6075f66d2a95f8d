"""
Translation of store-level failures into the application error taxonomy.

Constraint violations must never reach the client as raw 500s. Each known
constraint is listed in STORE_ERROR_MAP together with the column signature
SQLite prints in place of the constraint name.
"""
from typing import NamedTuple, Optional, Type

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import AppError, ConflictError, InternalError, NotFoundError

REGISTRATION_UNIQUE = "uq_registrations_user_event"
USER_EMAIL_UNIQUE = "uq_users_email"
FOREIGN_KEY = "foreign_key"


class StoreErrorMapping(NamedTuple):
    error: Type[AppError]
    detail: str
    status_code: Optional[int] = None


STORE_ERROR_MAP: dict[str, StoreErrorMapping] = {
    REGISTRATION_UNIQUE: StoreErrorMapping(ConflictError, "User is already registered for this event"),
    USER_EMAIL_UNIQUE: StoreErrorMapping(ConflictError, "A user with this email already exists", 409),
    FOREIGN_KEY: StoreErrorMapping(NotFoundError, "Referenced record not found"),
}

# SQLite reports "UNIQUE constraint failed: <table>.<col>, ..." without names
_SQLITE_SIGNATURES = {
    "registrations.user_id, registrations.event_id": REGISTRATION_UNIQUE,
    "users.email": USER_EMAIL_UNIQUE,
    "FOREIGN KEY constraint failed": FOREIGN_KEY,
}


def constraint_name(exc: IntegrityError) -> Optional[str]:
    """Best-effort name of the constraint behind an IntegrityError."""
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == "23503":
        return FOREIGN_KEY

    diag = getattr(exc.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name

    message = str(exc.orig)
    for signature, mapped in _SQLITE_SIGNATURES.items():
        if signature in message:
            return mapped
    if "foreign key" in message.lower():
        return FOREIGN_KEY
    return None


def translate_store_error(exc: SQLAlchemyError, *, not_found_detail: str = "Record not found") -> AppError:
    """Map a SQLAlchemy exception to the AppError the caller should raise."""
    if isinstance(exc, IntegrityError):
        mapping = STORE_ERROR_MAP.get(constraint_name(exc) or "")
        if mapping is not None:
            return mapping.error(mapping.detail, status_code=mapping.status_code)
        return InternalError("Unexpected constraint violation")

    if isinstance(exc, (NoResultFound, StaleDataError)):
        return NotFoundError(not_found_detail)

    return InternalError("Database error")
