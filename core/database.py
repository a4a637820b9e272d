"""Async SQLAlchemy database engine and session management.

Provides the pooled store client used by every repository:
- Connection pooling with a bounded acquisition timeout
- FastAPI dependency injection via get_session()
- Automatic session lifecycle (commit on success, rollback on error)
- PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs and tests
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from patterns.domain_config import DatabaseConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Engine & session factory
# ---------------------------------------------------------------------------

engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def configure_database(
    config: DatabaseConfig | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Build the engine and session factory from config.

    Replaces any previously configured engine; call close_db() first if the
    old pool still holds connections.
    """
    global engine, async_session_factory

    config = config or DatabaseConfig()
    engine = create_async_engine(
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        echo=config.echo,
        pool_pre_ping=True,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info(
        "database configured: dialect=%s pool_size=%d pool_timeout=%.1fs",
        engine.dialect.name,
        config.pool_size,
        config.pool_timeout,
    )
    return async_session_factory


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the configured session factory, configuring defaults on first use."""
    if async_session_factory is None:
        return configure_database()
    return async_session_factory


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session with automatic commit/rollback.

    Usage in FastAPI routes::

        @router.get("/items")
        async def list_items(session: AsyncSession = Depends(get_session)):
            result = await session.execute(select(Item))
            return result.scalars().all()
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Context manager variant for non-FastAPI code (scripts, tests, etc.)."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ---------------------------------------------------------------------------
# Lifecycle hooks
# ---------------------------------------------------------------------------

async def init_db() -> None:
    """Create tables from models (dev/test only; no migrations)."""
    from core.models.base import Base
    import verticals.library.models.db_models  # noqa: F401

    get_session_factory()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the connection pool on shutdown."""
    global engine, async_session_factory

    if engine is not None:
        await engine.dispose()
    engine = None
    async_session_factory = None
