"""Database setup with SQLAlchemy."""
import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from hms.config import get_settings


settings = get_settings()
logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_MARKERS = (
    "connection reset",
    "timed out",
    "timeout",
    "connection refused",
    "could not connect",
    "server closed the connection",
)


def build_engine(database_url: str):
    """Create an engine, with pooling options for server databases."""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_db():
    """Dependency for database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a block as one unit of work: commit on success, rollback on error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def is_transient_error(exc: Exception) -> bool:
    """True for connection-level failures worth retrying."""
    if isinstance(exc, DisconnectionError):
        return True
    if isinstance(exc, OperationalError):
        if exc.connection_invalidated:
            return True
        message = str(exc.orig if exc.orig is not None else exc).lower()
        return any(marker in message for marker in TRANSIENT_MARKERS)
    return False


def execute_with_retry(
    fn: Callable[[], T],
    retries: int | None = None,
    delay: float | None = None,
) -> T:
    """Call fn, retrying transient connection errors with linear backoff."""
    retries = settings.db_connect_retries if retries is None else retries
    delay = settings.db_retry_delay_seconds if delay is None else delay
    attempt = 0
    while True:
        attempt += 1
        try:
            return fn()
        except (OperationalError, DisconnectionError) as e:
            if attempt >= retries or not is_transient_error(e):
                raise
            wait = delay * attempt
            logger.warning(
                f"Transient database error (attempt {attempt}/{retries}), retrying in {wait}s: {e}"
            )
            time.sleep(wait)


def ping_database(bind=None) -> bool:
    """Run a trivial query against the database."""
    target = bind or engine
    with target.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True


def init_db():
    """Initialize database tables."""
    import hms.models  # noqa: F401 - register mappers
    execute_with_retry(ping_database)
    Base.metadata.create_all(bind=engine)
