"""Database Session Manager — async connection pool with automatic rollback and error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - Unique violations → DuplicateKeyError (409); other IntegrityErrors →
      ConstraintViolationError (400); other SQLAlchemy errors → PersistenceError (500)
    - commit() and flush() are the only places services write; both apply the same mapping

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Mapping happens in commit() as well as session(): exceptions raised inside a
      route are not guaranteed to pass back through a yield dependency
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import text

from iperformance.core.errors import (
    ConstraintViolationError, DuplicateKeyError, PersistenceError,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(e: IntegrityError) -> bool:
    """PostgreSQL reports SQLSTATE 23505; SQLite only says so in the message."""
    if getattr(e.orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "UNIQUE constraint failed" in str(e.orig)


def _map_error(e: SQLAlchemyError, operation: str) -> Exception:
    if isinstance(e, IntegrityError):
        if is_unique_violation(e):
            return DuplicateKeyError("A record with the same unique value already exists")
        return ConstraintViolationError("A required value is missing or invalid")
    return PersistenceError("Database operation failed", operation)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error: {e}")
            raise _map_error(e, "query")
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False


async def commit(db: AsyncSession) -> None:
    """Commit the unit of work, mapping storage failures to domain errors."""
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(f"DB commit failed: {e}")
        raise _map_error(e, "commit")


async def flush(db: AsyncSession) -> None:
    """Flush pending writes so constraint violations surface as domain errors."""
    try:
        await db.flush()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(f"DB flush failed: {e}")
        raise _map_error(e, "flush")


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
