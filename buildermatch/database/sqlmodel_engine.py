"""
SQLModel database engine and session management.

Provides the async engine, session factory and schema helpers used by the
persistence adapters. PostgreSQL (asyncpg) in deployments, SQLite (aiosqlite)
for local runs and integration tests.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from buildermatch.core.config import Settings

logger = structlog.get_logger(__name__)


def _normalize_url(url: str) -> str:
    """Convert plain PostgreSQL URLs to the asyncpg dialect."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


class SQLModelDatabaseManager:
    """
    SQLModel database manager with async session support.

    ``get_session()`` commits on success and rolls back on any error, so every
    repository call is one unit of work.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self.async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized and self.engine is not None

    @property
    def database_url(self) -> str:
        return _normalize_url(self.settings.DATABASE_URL)

    async def initialize(self) -> None:
        """Create the engine and session factory."""
        if self._initialized:
            logger.warning("SQLModel database manager already initialized")
            return

        url = self.database_url
        engine_options = {"echo": self.settings.DATABASE_ECHO}
        if not url.startswith("sqlite"):
            engine_options.update(
                pool_size=self.settings.DATABASE_POOL_SIZE,
                max_overflow=self.settings.DATABASE_POOL_SIZE * 2,
                pool_pre_ping=True,
                pool_recycle=3600,
            )

        try:
            self.engine = create_async_engine(url, **engine_options)
            self.async_session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=True,
            )
            self._initialized = True
            logger.info(
                "SQLModel database manager initialized",
                database_url=url.split("@")[-1] if "@" in url else url,
            )
        except Exception as e:
            logger.error("Failed to initialize SQLModel database manager", error=str(e))
            raise

    async def create_tables(self) -> None:
        """
        Create all SQLModel tables.

        Used for local runs and tests. Deployments use Alembic migrations.
        """
        if not self.engine:
            raise RuntimeError("Database manager not initialized")

        # Register table models on the shared metadata.
        from buildermatch.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("SQLModel tables created")

    async def drop_tables(self) -> None:
        """Drop all SQLModel tables. Deletes every row."""
        if not self.engine:
            raise RuntimeError("Database manager not initialized")

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        logger.warning("SQLModel tables dropped")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get async database session with automatic commit/rollback.

        Usage:
            async with db_manager.get_session() as session:
                result = await session.execute(select(InterestTable))
        """
        if not self.async_session_factory:
            raise RuntimeError("Database manager not initialized")

        session = self.async_session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("SQLModel database engine disposed")
        self.engine = None
        self.async_session_factory = None
        self._initialized = False


__all__ = ["SQLModelDatabaseManager"]
