"""
Database connection and session management.

This module provides async database session management using SQLAlchemy 2.0.
The engine and session factory are created once by the application lifespan
and stored on ``app.state``; request handlers obtain sessions through
``get_db``. Nothing here holds a module-level connection.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from pasteit.core.config import settings
from pasteit.models.base import Base

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Database Engine Configuration
# -----------------------------------------------------------------------------


def is_in_memory_sqlite(url: str) -> bool:
    """Check whether a URL names an in-memory SQLite database."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return False
    return parsed.database in (None, "", ":memory:") or parsed.query.get("mode") == "memory"


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create async database engine.

    PostgreSQL gets a connection pool sized from settings. In-memory SQLite
    gets a single shared connection so that the database survives across
    sessions; file SQLite keeps the default pool so that each session has
    its own connection and transaction.

    Args:
        database_url: Database URL. If None, uses settings.database_url

    Returns:
        Configured AsyncEngine instance
    """
    url = database_url or settings.database_url

    logger.info("Initializing database engine...")

    if is_in_memory_sqlite(url):
        engine = create_async_engine(
            url,
            echo=settings.debug,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        logger.info("Database engine created: sqlite in memory (static pool)")
        return engine

    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=settings.debug)
        logger.info("Database engine created: sqlite file")
        return engine

    engine = create_async_engine(
        url,
        echo=settings.debug,
        echo_pool=settings.debug,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=settings.db_pool_recycle,
        pool_timeout=settings.db_pool_timeout,
        poolclass=AsyncAdaptedQueuePool,
        connect_args={
            "server_settings": {
                "application_name": f"{settings.app_name} - {settings.environment}",
            },
        },
    )

    logger.info(
        f"Database engine created: pool_size={settings.db_pool_size}, "
        f"max_overflow={settings.db_max_overflow}"
    )

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables, unique constraints and indexes.

    Idempotent: existing tables are left untouched.
    """
    # Register models on Base.metadata
    import pasteit.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


# -----------------------------------------------------------------------------
# Session Dependency
# -----------------------------------------------------------------------------


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit their own unit of work; anything left pending when the
    request fails is rolled back here.
    """
    sessionmaker: async_sessionmaker[AsyncSession] = request.app.state.sessionmaker
    async with sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# -----------------------------------------------------------------------------
# Health & Lifecycle
# -----------------------------------------------------------------------------


async def check_database_connection(
    sessionmaker: async_sessionmaker[AsyncSession] | None,
) -> bool:
    """
    Check that the store answers a trivial query.

    Returns:
        True if the database is reachable, False otherwise
    """
    if sessionmaker is None:
        return False
    try:
        async with sessionmaker() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def close_database_connection(engine: AsyncEngine) -> None:
    """
    Close database engine and dispose of connection pool.

    Should be called on application shutdown to gracefully close
    all database connections.
    """
    try:
        await engine.dispose()
        logger.info("Database engine disposed successfully")
    except Exception as e:
        logger.error(f"Error disposing database engine: {e}")
        # Don't raise - we're shutting down anyway
