"""Async database engine for the embedded cache table.

The cache lives in a single SQLite file by default. ``Database`` owns the
engine and session factory; one instance is opened in the application
lifespan, kept on ``app.state`` and disposed on shutdown.

Usage:
    from aipulse.core.database import Database

    database = Database.from_settings(settings)
    await database.create_tables()

    async with database.session() as session:
        ...

    await database.close()
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from aipulse.config import Settings
from aipulse.core.logging import get_logger
from aipulse.models import Base

logger = get_logger(__name__)


class Database:
    """Engine plus session factory for one database URL."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url

        engine_kwargs: dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            # An in-memory database only exists for the life of its one
            # connection, so it must be shared; file databases are opened
            # per use.
            if ":memory:" in url:
                engine_kwargs["poolclass"] = StaticPool
            else:
                engine_kwargs["poolclass"] = NullPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database from application settings."""
        logger.info("database_opening", database_url=_mask_password(settings.database_url))
        return cls(settings.database_url, echo=settings.debug)

    @property
    def dialect(self) -> str:
        """Dialect name of the underlying engine (e.g. ``sqlite``)."""
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back if the block raises."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create every table registered on ``Base`` if missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_ready", tables=sorted(Base.metadata.tables))

    async def ping(self) -> bool:
        """Check that the database answers ``SELECT 1``."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Dispose the engine and all pooled connections."""
        await self.engine.dispose()
        logger.info("database_closed")


def _mask_password(url: str) -> str:
    """Mask the password part of a database URL for logging."""
    if "://" in url and "@" in url:
        prefix, rest = url.split("://", 1)
        creds, host = rest.split("@", 1)
        if ":" in creds:
            user = creds.split(":", 1)[0]
            return f"{prefix}://{user}:****@{host}"
    return url
