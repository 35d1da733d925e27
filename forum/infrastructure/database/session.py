"""Async database engine and session lifecycle management.

A single AsyncEngine per process is created lazily by _DatabaseManager and
shared by every request. Sessions are handed out through
``get_async_session``, which commits when the block succeeds and rolls back
when it raises.

Core functionality:
- **Connection pooling**: Pool size, overflow and timeout from settings
- **Session factory**: Async sessions that don't expire objects on commit
- **Schema creation**: Tables created from the ORM metadata at startup
- **Health checks**: Database connectivity validation for /health
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from forum.core.config import get_settings
from forum.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    DATABASE_CHECK_QUERY,
    POOL_RECYCLE_SECONDS,
)
from forum.infrastructure.database.base import Base


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine with connection pooling.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    db_config = get_settings().database_config
    url = database_url or db_config.database_url

    engine = create_async_engine(
        url,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
        echo=db_config.echo,
        pool_recycle=POOL_RECYCLE_SECONDS,
        connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
    )

    logger.info(
        "Created database engine - pool_size: {}, max_overflow: {}",
        db_config.pool_size,
        db_config.max_overflow,
    )
    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        """Get or create the async engine instance."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if self._async_session_factory is None:
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = async_sessionmaker(
                        self.get_engine(),
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Dispose of the engine and forget the factory."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
            self._engine = None
            self._async_session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get an async database session with automatic cleanup.

    The session is committed when the block completes and rolled back when it
    raises.

    Yields:
        AsyncGenerator[AsyncSession]: Database session for performing operations.

    Raises:
        Exception: Any exception raised inside the block, after rollback.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise


async def create_tables() -> None:
    """Create every table of the ORM metadata that doesn't exist yet."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured: {}", sorted(Base.metadata.tables))


async def close_database() -> None:
    """Close the database engine and its pooled connections."""
    await _db_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check if database connection is available.

    Returns:
        tuple[bool, str | None]: Whether the database answered, and the error
            message when it didn't.
    """
    try:
        async with get_engine().connect() as conn:
            result = await conn.execute(text(DATABASE_CHECK_QUERY))
            _ = result.scalar()
    except (SQLAlchemyError, OSError) as e:
        return False, str(e)
    else:
        return True, None
