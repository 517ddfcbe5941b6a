"""Database Session Manager — async engine, per-request sessions and error mapping.

Invariants:
    - Every session rolls back on any exception before it is closed
    - SQLAlchemy exceptions leave this layer only as DatabaseError (core/errors.py)
    - pool_pre_ping detects stale server connections
    - db_manager is None until init_db() runs in the lifespan

Design Decisions:
    - One error table shared with the entity store's commit(), most specific class first
    - Pool sizing only applied to server databases; SQLite keeps its own pool class
    - expire_on_commit=False: handlers build responses from rows after commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from taskflow.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# ADR: every mapping explicit; first matching class wins
DB_ERROR_TABLE: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def to_database_error(exc: SQLAlchemyError, operation: str | None = None) -> DatabaseError:
    for exc_type, message, default_operation in DB_ERROR_TABLE:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation or default_operation)
    return DatabaseError("Database operation failed", operation or "unknown")


class DatabaseSessionManager:
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
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One unit of work. Rolls back on any exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error ({type(e).__name__}): {e}")
            raise to_database_error(e) from e
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a fresh session, for the readiness probe."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Initialized on startup by the lifespan
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
