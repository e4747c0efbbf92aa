"""
Database connection management.

The journal owns a single storage handle for the lifetime of the process.
``Database`` wraps the engine and session factory; callers create it once at
start-up and release it with ``dispose()`` (or a ``with`` block) at exit.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import logging

from wellness_journal.core.config import settings, resolve_database_url
from wellness_journal.core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class Database:
    """Explicitly owned storage handle (engine + session factory)."""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or resolve_database_url(settings)
        engine_kwargs = {"echo": settings.DEBUG if echo is None else echo}

        if self.url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_url(self.url):
                # Every session must see the same in-memory database
                engine_kwargs["poolclass"] = StaticPool

        self.engine: Engine = create_engine(self.url, **engine_kwargs)

        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", self._set_sqlite_pragma)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,  # Prevent lazy loading issues
        )

    def _set_sqlite_pragma(self, dbapi_conn, connection_record):
        """Set connection-level settings."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not _is_memory_url(self.url):
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()
        logger.debug("New database connection established")

    def create_all(self) -> None:
        """Create journal tables if they don't exist."""
        # Register the mapped tables on Base.metadata
        from wellness_journal import models  # noqa: F401

        try:
            Base.metadata.create_all(bind=self.engine)
        except OperationalError as e:
            logger.error(f"Failed to create journal tables: {e}")
            raise StorageUnavailableError(str(e)) from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Session scope for one journal routine.

        Commits on success, rolls back on error and always closes.
        OperationalError (locked file, missing directory, bad URL) is surfaced
        as StorageUnavailableError.
        """
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except OperationalError as e:
            db.rollback()
            logger.error(f"Database transaction error: {e}")
            raise StorageUnavailableError(str(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def check_connection(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except OperationalError as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


def commit_or_raise(db: Session) -> None:
    """Commit the pending unit of work; a failed commit leaves nothing behind."""
    try:
        db.commit()
    except OperationalError as e:
        db.rollback()
        logger.error(f"Failed to commit journal write: {e}")
        raise StorageUnavailableError(str(e)) from e
