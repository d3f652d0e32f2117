from typing import Any, Dict

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.orm import Session

from errors import construct_error, validation_message
from schemas import SignIn, TokenOut
from security import TokenIssuer, verify_password
from user_service import DUPLICATE_EMAIL_MESSAGE, create_user, get_user_by_email, validate_user_payload


def sign_up(db: Session, issuer: TokenIssuer, payload: Dict[str, Any]) -> TokenOut:
    data = validate_user_payload(payload)

    if get_user_by_email(db, data.email):
        raise construct_error(DUPLICATE_EMAIL_MESSAGE, 400)

    user = create_user(db, data)
    logger.info(f"User {user.id} signed up")
    return TokenOut(access_token=issuer.issue(user.id))


def sign_in(db: Session, issuer: TokenIssuer, payload: Dict[str, Any]) -> TokenOut:
    try:
        credentials = SignIn.model_validate(payload or {})
    except ValidationError as exc:
        raise construct_error(validation_message(exc), 400) from exc

    user = get_user_by_email(db, credentials.email)
    if not user:
        raise construct_error("User not found.", 404)

    if not verify_password(credentials.password, user.password):
        raise construct_error("Email or password are incorrect. Please try again.", 400)

    logger.info(f"User {user.id} signed in")
    return TokenOut(access_token=issuer.issue(user.id))
