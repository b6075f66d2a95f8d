import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database.errors import translate_store_error
from app.models.users import User


def create_user(db: Session, name: str, email: str) -> User:
    """
    Insert a user inside a savepoint so the row is checked against
    uq_users_email without discarding the caller's transaction.
    """
    user = User(name=name, email=email)
    try:
        with db.begin_nested():
            db.add(user)
    except IntegrityError as e:
        raise translate_store_error(e) from e
    return user


def get_user(db: Session, user_id: uuid.UUID) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email))
