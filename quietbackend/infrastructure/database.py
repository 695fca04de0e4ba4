"""Database Session Manager — pooled connections with automatic rollback and error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - A session is checked out per store operation and returned to the pool afterwards
    - All SQLAlchemy exceptions mapped to TwoFaceError (core/errors.py); pool
      checkout timeouts become ServerError, integrity violations UserConflict
    - Connection pool uses pool_pre_ping for stale connection detection

Design Decisions:
    - Blocking engine driven from StoreWorkerPool threads: the pool bounds how many
      store calls hold a connection at once
    - expire_on_commit=False: rows stay readable after the session closes
    - In-memory SQLite uses StaticPool so every worker thread sees the same database;
      file-backed SQLite gets the same bounded QueuePool as Postgres
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from quietbackend.core.errors import Cause, ExternalError, TwoFaceError, describe
from quietbackend.db.base import Base
import quietbackend.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)


def _engine_options(
    database_url: str, pool_size: int, max_overflow: int, pool_timeout: float,
) -> dict:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }
    options: dict = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    else:
        options.update(
            pool_size=pool_size, max_overflow=max_overflow, pool_timeout=pool_timeout,
        )
    return options


class DatabaseSessionManager:
    """Manages database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: float = 30.0,
    ):
        self.engine: Engine = create_engine(
            database_url,
            **_engine_options(database_url, pool_size, max_overflow, pool_timeout),
        )
        self._session_factory = sessionmaker(
            self.engine, class_=Session, expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise describe(
                e, ExternalError(Cause.USER_CONFLICT, "Conflicting write"),
            ) from e
        except PoolTimeoutError as e:
            session.rollback()
            logger.error(f"DB pool exhausted: {e}")
            raise TwoFaceError(internal=e) from e
        except OperationalError as e:
            session.rollback()
            logger.error(f"DB operational error: {e}")
            raise TwoFaceError(internal=e) from e
        except DBAPIError as e:
            session.rollback()
            logger.error(f"DB driver error: {e}")
            raise TwoFaceError(internal=e) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise TwoFaceError(internal=e) from e
        finally:
            session.close()

    def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except TwoFaceError as e:
            logger.error(f"DB health check failed: {e.internal}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
