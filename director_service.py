from typing import Optional

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import Transaction
from errors import INTERNAL_ERROR_MESSAGE, construct_error, validation_message
from models import Director
from schemas import DirectorCreate


def find_director(db: Session, full_name: str) -> Optional[Director]:
    return db.query(Director).filter(Director.full_name == full_name).first()


def create_director(db: Session, full_name: str, transaction: Optional[Transaction] = None) -> Director:
    """Insert a director.

    Inside a caller's transaction the row is only flushed; committing or
    rolling it back is left to the transaction owner.
    """
    try:
        data = DirectorCreate.model_validate({"fullName": full_name})
    except ValidationError as exc:
        raise construct_error(validation_message(exc), 400) from exc

    session = transaction.session if transaction else db
    director = Director(full_name=data.full_name)
    try:
        session.add(director)
        if transaction:
            session.flush()
        else:
            session.commit()
            session.refresh(director)
    except SQLAlchemyError as exc:
        if not transaction:
            session.rollback()
        logger.error(f"Could not create director {data.full_name!r}: {exc}")
        raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    logger.info(f"Created director {director.id} ({director.full_name})")
    return director
