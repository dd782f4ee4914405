"""
Database handle and transaction management.

A ``PostgresDatabase`` is constructed once per process and injected into the
repositories; it is never imported as ambient module state. Repositories
receive the session yielded by ``transaction()`` and never commit it: the
context manager commits on success and rolls back on any exception.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from forms_manager.core.config import Settings

logger = logging.getLogger(__name__)

# Create declarative base for ORM models
Base = declarative_base()


class PostgresDatabase:
    """Owns the async engine and session factory for one database."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostgresDatabase":
        engine = create_async_engine(
            settings.async_database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Plain session for reads outside a transaction."""
        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Session with an open transaction.

        Commits when the block exits normally, rolls back when it raises.
        The session is always closed.
        """
        session = self.session_factory()
        try:
            async with session.begin():
                yield session
        finally:
            await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


async def init_database(database: PostgresDatabase) -> None:
    """
    Create tables if they don't exist.

    Note: In production, use migrations instead.
    This is mainly for development/testing.
    """
    # Register ORM models with Base before create_all
    from forms_manager.domain.models import forms  # noqa: F401

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized")


def create_database(settings: Settings) -> Optional[PostgresDatabase]:
    """Build the PostgreSQL handle, or None when no DATABASE_URL is set."""
    if not settings.database_url:
        return None
    return PostgresDatabase.from_settings(settings)
