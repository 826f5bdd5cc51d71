"""
Database Service
================

Process-wide async engine and session factory for the player store.

- `get_transaction()` is the only write path: it commits when the block
  exits cleanly and rolls back on any exception. Service code never calls
  `session.commit()` itself.
- `get_session()` is for reads; nothing is committed.
- Concurrent writers to one player row are caught by the row's version
  column at flush time (see PlayerRecord), not by this layer.
- Testing runs on NullPool so each test gets fresh connections.

>>> await DatabaseService.initialize()
>>> async with DatabaseService.get_transaction() as session:
...     record = await session.get(PlayerRecord, account_id)
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from questline.core.config.config import Config
from questline.core.database.base import Base
from questline.core.logging.logger import get_logger

logger = get_logger(__name__)


class DatabaseInitializationError(RuntimeError):
    """Raised when the engine cannot be created from the configured URL."""


class DatabaseNotInitializedError(RuntimeError):
    """Raised when a session is requested before initialize()."""


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": Config.DATABASE_ECHO}
    if Config.is_testing():
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=Config.DATABASE_POOL_SIZE,
            max_overflow=Config.DATABASE_MAX_OVERFLOW,
            pool_recycle=Config.DATABASE_POOL_RECYCLE,
            pool_timeout=Config.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,
        )
    return options


class DatabaseService:
    """
    Classmethod singleton around one AsyncEngine.

    Lifecycle: initialize() -> create_schema() (dev/tests) -> shutdown().
    """

    _engine: Optional[AsyncEngine] = None
    _session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    _is_postgres: bool = False
    _init_lock: asyncio.Lock = asyncio.Lock()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    @classmethod
    async def initialize(cls, url: Optional[str] = None) -> None:
        """
        Create the engine and session factory. Idempotent.

        Args:
            url: Override for Config.DATABASE_URL (integration tests)

        Raises:
            DatabaseInitializationError: Missing URL or engine creation failed
        """
        async with cls._init_lock:
            if cls._engine is not None:
                return

            database_url = url or Config.DATABASE_URL
            if not database_url:
                raise DatabaseInitializationError("DATABASE_URL must be configured")

            try:
                cls._engine = create_async_engine(database_url, **_engine_options())
            except Exception as exc:
                logger.error(
                    "Database engine creation failed",
                    extra={"error_type": type(exc).__name__},
                    exc_info=True,
                )
                raise DatabaseInitializationError(f"Database initialization failed: {exc}") from exc

            cls._session_factory = async_sessionmaker(cls._engine, expire_on_commit=False)
            cls._is_postgres = cls._engine.dialect.name == "postgresql"
            logger.info(
                "DatabaseService initialized",
                extra={"dialect": cls._engine.dialect.name, "testing": Config.is_testing()},
            )

    @classmethod
    async def create_schema(cls) -> None:
        """Create every table registered on Base (existing tables are kept)."""
        engine = cls._require_engine()

        # Registers PlayerRecord on Base.metadata
        import questline.database.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    @classmethod
    async def shutdown(cls) -> None:
        """Dispose the engine. Safe to call when not initialized."""
        async with cls._init_lock:
            if cls._engine is None:
                return
            try:
                await cls._engine.dispose()
            finally:
                cls._engine = None
                cls._session_factory = None
            logger.info("DatabaseService shut down")

    @classmethod
    async def health_check(cls) -> bool:
        """Run ``SELECT 1``; returns False instead of raising."""
        if cls._engine is None:
            return False

        start = time.perf_counter()
        try:
            async with cls._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except DBAPIError as exc:
            logger.warning("Database health check failed", extra={"error_type": type(exc).__name__})
            return False
        logger.debug(
            "Database health check passed",
            extra={"duration_ms": (time.perf_counter() - start) * 1000.0},
        )
        return True

    # ========================================================================
    # Sessions
    # ========================================================================

    @classmethod
    def _require_engine(cls) -> AsyncEngine:
        if cls._session_factory is None or cls._engine is None:
            logger.error("DatabaseService used before initialization")
            raise DatabaseNotInitializedError(
                "DatabaseService must be initialized before use. "
                "Call DatabaseService.initialize() during startup."
            )
        return cls._engine

    @classmethod
    async def _open(cls, session: AsyncSession) -> None:
        if cls._is_postgres:
            await session.execute(
                text(f"SET LOCAL statement_timeout = {int(Config.DATABASE_STATEMENT_TIMEOUT_MS)}")
            )

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncGenerator[AsyncSession, None]:
        """Read session; nothing is committed."""
        cls._require_engine()
        assert cls._session_factory is not None

        async with cls._session_factory() as session:
            await cls._open(session)
            yield session

    @classmethod
    @asynccontextmanager
    async def get_transaction(cls) -> AsyncGenerator[AsyncSession, None]:
        """
        Atomic write session: commit on clean exit, roll back and re-raise
        otherwise.

        Raises:
            DatabaseNotInitializedError: initialize() has not run
            StaleDataError: A versioned row was changed by another writer
        """
        cls._require_engine()
        assert cls._session_factory is not None

        start = time.perf_counter()
        async with cls._session_factory() as session:
            try:
                await cls._open(session)
                yield session
                await session.commit()
            except Exception as exc:
                await session.rollback()
                logger.debug(
                    "Transaction rolled back",
                    extra={
                        "error_type": type(exc).__name__,
                        "duration_ms": (time.perf_counter() - start) * 1000.0,
                    },
                )
                raise
