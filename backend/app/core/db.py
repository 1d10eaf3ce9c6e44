import time
from collections.abc import Callable, Generator
from functools import wraps
from logging import getLogger
from typing import Any, TypeVar

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings
from app.exceptions.base import TransportError

logger = getLogger(__name__)

T = TypeVar("T")


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs: Any) -> Engine:
    """
    Create an engine for the given database URL.

    SQLite does not enforce foreign keys unless asked to on every connection,
    so a connect listener is attached for sqlite URLs.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)


def init_db(session: Session) -> None:
    # Tables should be created with Alembic migrations in production.
    # Importing the models registers them on SQLModel.metadata.
    from app import models  # noqa: F401

    SQLModel.metadata.create_all(session.get_bind())


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def retry_read(func: Callable[..., T]) -> Callable[..., T]:
    """
    Retry an idempotent read on transient database failures.

    Only OperationalError is retried, bounded by settings.READ_RETRY_ATTEMPTS
    with exponential backoff; once attempts are exhausted a TransportError is
    raised. Any other DBAPIError becomes a TransportError straight away. Only
    decorate functions that read; writes must never be retried.
    """

    @wraps(func)
    def wrapper(*args: Any, session: Session, **kwargs: Any) -> T:
        attempts = max(1, settings.READ_RETRY_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, session=session, **kwargs)
            except OperationalError as e:
                session.rollback()
                if attempt == attempts:
                    logger.error(
                        "%s failed after %d attempts: %s", func.__name__, attempt, e
                    )
                    raise TransportError from e
                delay = settings.READ_RETRY_BACKOFF_SECONDS * 2 ** (attempt - 1)
                logger.warning(
                    "%s failed (attempt %d/%d), retrying in %.2fs",
                    func.__name__,
                    attempt,
                    attempts,
                    delay,
                )
                time.sleep(delay)
            except DBAPIError as e:
                session.rollback()
                logger.error("%s failed: %s", func.__name__, e)
                raise TransportError from e
        raise AssertionError("unreachable")

    return wrapper
