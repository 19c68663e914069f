"""
Application lifespan: store handle creation and the expiry sweep task.

The engine and session factory are built here once and stored on
``app.state``; nothing else in the package creates them.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pasteit.core.config import settings
from pasteit.core.database import (
    close_database_connection,
    create_database_engine,
    create_session_factory,
    create_tables,
)
from pasteit.services.paste_service import PasteService

logger = logging.getLogger(__name__)


async def run_expiry_sweeps(
    sessionmaker: async_sessionmaker[AsyncSession],
    interval_seconds: int,
) -> None:
    """
    Sweep expired pastes now and then every ``interval_seconds``.

    A failed sweep is logged and the loop keeps going; the next run
    catches up because the sweep is idempotent.
    """
    while True:
        try:
            async with sessionmaker() as session:
                await PasteService(session).sweep_expired()
        except Exception:
            logger.exception("Expiry sweep failed")
        await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore
    """
    Lifespan context manager for startup and shutdown events.

    Handles:
    - Database engine creation and table setup
    - Session factory creation, stored in app.state
    - The periodic expiry sweep
    - Resource cleanup on shutdown
    """
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    logger.info(f"Environment: {settings.environment}")

    engine = create_database_engine()
    if settings.db_create_tables:
        await create_tables(engine)

    app.state.sessionmaker = create_session_factory(engine)
    logger.info("Sessionmaker created successfully")

    sweep_task: asyncio.Task[None] | None = None
    if settings.expiry_sweep_interval_seconds > 0:
        sweep_task = asyncio.create_task(
            run_expiry_sweeps(app.state.sessionmaker, settings.expiry_sweep_interval_seconds)
        )
        logger.info(
            f"Expiry sweep scheduled every {settings.expiry_sweep_interval_seconds}s"
        )

    yield

    logger.info("Shutting down application")
    if sweep_task is not None:
        sweep_task.cancel()
        with suppress(asyncio.CancelledError):
            await sweep_task
    await close_database_connection(engine)
    app.state.sessionmaker = None
