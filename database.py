from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from errors import construct_error

Base = declarative_base()


def make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    # in-memory databases vanish with their connection, so keep exactly one
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    # models must be imported so their tables are registered on Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# FastAPI dependency
def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


class Transaction:
    """Explicit unit of work over a session.

    Callers that receive a transaction stage their writes on
    ``transaction.session`` and leave commit/rollback to its owner.
    """

    def __init__(self, session: Session):
        self.session = session

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


@contextmanager
def transaction(session: Session) -> Iterator[Transaction]:
    txn = Transaction(session)
    try:
        yield txn
        txn.commit()
    except Exception:
        try:
            txn.rollback()
        except SQLAlchemyError as exc:
            logger.error(f"Transaction rollback failed: {exc}")
            raise construct_error("Transaction rollback failed.", 500) from exc
        raise
