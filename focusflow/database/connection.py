"""
Async engine and session handling for the FocusFlow store.

Tables are created on first use. Every repository goes through
`Database.session()`, which commits on success and rolls back on error.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from config import settings
from .exceptions import DatabaseConnectionError
from .models import Base

logger = logging.getLogger(__name__)

DB_HEALTHY = "healthy"
DB_UNHEALTHY = "unhealthy"
DB_NOT_CONFIGURED = "not_configured"


def normalize_database_url(database_url: str) -> str:
    """Point postgres URLs at the asyncpg driver."""
    for prefix in ("postgres://", "postgresql://"):
        if database_url.startswith(prefix):
            return "postgresql+asyncpg://" + database_url[len(prefix):]
    return database_url


def _engine_options() -> Dict[str, Any]:
    # A pooled connection cannot cross the per-test event loops
    if settings.environment == "test":
        return {"poolclass": NullPool}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,
    }


class Database:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self):
        self.engine = None
        self._sessions: Optional[async_sessionmaker] = None

    @property
    def ready(self) -> bool:
        return self._sessions is not None

    async def initialize(self) -> bool:
        """Create the engine and tables. False when no database is configured or reachable."""
        if self.ready:
            return True
        if not settings.database_url:
            logger.warning("DATABASE_URL not configured")
            return False

        engine = None
        try:
            engine = create_async_engine(
                normalize_database_url(settings.database_url),
                echo=settings.database_echo,
                **_engine_options(),
            )
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database initialization failed: {e}")
            if engine is not None:
                await engine.dispose()
            return False

        self.engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
        logger.info(f"Database ready ({engine.url.get_backend_name()})")
        return True

    async def close(self):
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connection closed")
        self.engine = None
        self._sessions = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Transactional session. Commits on success, rolls back on error."""
        if not self.ready and not await self.initialize():
            raise DatabaseConnectionError("Database not initialized")

        async with self._sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> str:
        """Round-trip a trivial query and report the store's state."""
        if not settings.database_url:
            return DB_NOT_CONFIGURED
        if not await self.initialize():
            return DB_UNHEALTHY
        try:
            async with self._sessions() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return DB_UNHEALTHY
        return DB_HEALTHY


_database: Optional[Database] = None


def get_database() -> Database:
    global _database
    if _database is None:
        _database = Database()
    return _database


async def init_database() -> bool:
    return await get_database().initialize()


async def close_database():
    global _database
    if _database is not None:
        await _database.close()
        _database = None
