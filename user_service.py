from typing import Any, Dict, Optional, Union

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from errors import INTERNAL_ERROR_MESSAGE, construct_error, validation_message
from models import User
from schemas import UserCreate, UserOut, UserUpdate
from security import hash_password

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists."


def sanitize(user: User) -> UserOut:
    # UserOut has no password field, so the hash never leaves the service
    return UserOut.model_validate(user)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def _load_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise construct_error("User not found", 404)
    return user


def get_user(db: Session, user_id: int) -> UserOut:
    return sanitize(_load_user(db, user_id))


def validate_user_payload(payload: Dict[str, Any]) -> UserCreate:
    try:
        return UserCreate.model_validate(payload or {})
    except ValidationError as exc:
        raise construct_error(validation_message(exc), 400) from exc


def create_user(db: Session, payload: Union[Dict[str, Any], UserCreate]) -> UserOut:
    data = payload if isinstance(payload, UserCreate) else validate_user_payload(payload)

    user = User(
        email=data.email,
        password=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        # a concurrent sign-up won the unique email constraint
        db.rollback()
        raise construct_error(DUPLICATE_EMAIL_MESSAGE, 400) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Could not create user {data.email}: {exc}")
        raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    logger.info(f"Created user {user.id} ({user.email})")
    return sanitize(user)


def update_user(db: Session, user_id: int, payload: Dict[str, Any]) -> UserOut:
    user = _load_user(db, user_id)

    try:
        changes = UserUpdate.model_validate(payload or {}).model_dump(exclude_unset=True)
    except ValidationError as exc:
        raise construct_error(validation_message(exc), 400) from exc

    for field, value in changes.items():
        setattr(user, field, value)
    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Could not update user {user_id}: {exc}")
        raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    return sanitize(user)
