"""
Test the translation table from store errors to application errors.
"""
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConflictError, InternalError, NotFoundError
from app.database.errors import (
    FOREIGN_KEY,
    REGISTRATION_UNIQUE,
    STORE_ERROR_MAP,
    USER_EMAIL_UNIQUE,
    constraint_name,
    translate_store_error,
)
from app.models.registrations import Registration
from app.models.users import User


def _integrity_error(orig) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


class TestMappingTable:
    """Every known constraint maps to a fixed outcome."""

    def test_table_covers_known_constraints(self):
        assert set(STORE_ERROR_MAP) == {REGISTRATION_UNIQUE, USER_EMAIL_UNIQUE, FOREIGN_KEY}

    @pytest.mark.parametrize("name, error, status_code, detail", [
        (REGISTRATION_UNIQUE, ConflictError, 400, "User is already registered for this event"),
        (USER_EMAIL_UNIQUE, ConflictError, 409, "A user with this email already exists"),
        (FOREIGN_KEY, NotFoundError, 404, "Referenced record not found"),
    ])
    def test_constraint_outcomes(self, name, error, status_code, detail):
        orig = Exception("duplicate key")
        orig.diag = SimpleNamespace(constraint_name=name)
        translated = translate_store_error(_integrity_error(orig))

        assert type(translated) is error
        assert translated.status_code == status_code
        assert translated.detail == detail

    def test_postgres_foreign_key_sqlstate(self):
        orig = Exception("insert or update violates foreign key constraint")
        orig.sqlstate = "23503"
        orig.diag = SimpleNamespace(constraint_name="registrations_user_id_fkey")

        assert constraint_name(_integrity_error(orig)) == FOREIGN_KEY

    def test_unknown_constraint_is_internal(self):
        translated = translate_store_error(_integrity_error(Exception("NOT NULL constraint failed: events.title")))

        assert isinstance(translated, InternalError)
        assert translated.status_code == 500

    def test_missing_rows_are_not_found(self):
        assert isinstance(translate_store_error(NoResultFound()), NotFoundError)
        translated = translate_store_error(StaleDataError(), not_found_detail="Registration not found")
        assert isinstance(translated, NotFoundError)
        assert translated.detail == "Registration not found"

    def test_other_store_errors_are_internal(self):
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))
        assert isinstance(translate_store_error(error), InternalError)


class TestSQLiteSignatures:
    """SQLite messages carry column lists instead of constraint names."""

    def test_duplicate_registration(self, db_session: Session, event_factory, user_factory):
        event = event_factory()
        user = user_factory()
        db_session.add(Registration(user_id=user.id, event_id=event.id))
        db_session.commit()

        db_session.add(Registration(user_id=user.id, event_id=event.id))
        with pytest.raises(IntegrityError) as exc_info:
            db_session.flush()
        db_session.rollback()

        assert constraint_name(exc_info.value) == REGISTRATION_UNIQUE

    def test_duplicate_email(self, db_session: Session, user_factory):
        user_factory(email="dup@example.com")

        db_session.add(User(name="Dup", email="dup@example.com"))
        with pytest.raises(IntegrityError) as exc_info:
            db_session.flush()
        db_session.rollback()

        assert constraint_name(exc_info.value) == USER_EMAIL_UNIQUE
