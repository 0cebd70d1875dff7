from typing import Generator
from contextlib import contextmanager

from campus_events.database.session import SQLALCHEMY_DATABASE_URL, get_engine, get_local_session
from campus_events.log import get_logger

log = get_logger(__name__)


ENGINE = get_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = get_local_session(ENGINE)


def get_db() -> Generator:  # pragma: no cover
    """
    Returns a generator that yields a database session

    Yields:
        Session: A database session object.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_ctx_db() -> Generator:
    """
    Context manager that yields a session for use outside a request,
    committing on success and rolling back on error.

    Yields:
        Session: A database session.

    Raises:
        Exception: Whatever the body raised, after the rollback.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        log.error("An error occurred while using the database session. Error: %s", e)
        db.rollback()
        raise
    finally:
        db.close()
