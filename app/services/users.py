import logging
import uuid

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud import users as user_store
from app.models.users import User
from app.schemas.users import UserCreate

logger = logging.getLogger(__name__)


def create_user(db: Session, payload: UserCreate) -> User:
    try:
        user = user_store.create_user(db, name=payload.name, email=payload.email)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Created user {user.id}")
    return user


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = user_store.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
