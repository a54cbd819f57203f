"""
Startup and shutdown of the market service.

Startup creates the tables, seeds the runtime feature flags and logs which
of them are on. A background task then re-reads the flags at the configured
interval until shutdown cancels it.
"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import models  # noqa: F401  registers every table on Base.metadata
from ..config.settings import settings
from ..config.settings_loader import (describe_settings, initialize_db_with_default_settings,
                                      load_settings_from_db)
from ..db.database import Base, SessionLocal, engine

logger = logging.getLogger(__name__)


def refresh_runtime_settings(seed: bool = False) -> str:
    """Loads the feature flags in a short-lived session. Seeds missing rows first when seed is set."""
    with SessionLocal() as db:
        if seed:
            initialize_db_with_default_settings(db)
        load_settings_from_db(db)
    return describe_settings()


async def periodic_settings_reload(interval: int):
    while True:
        await asyncio.sleep(interval)
        try:
            flags = await asyncio.to_thread(refresh_runtime_settings)
            logger.debug("Runtime settings reloaded: %s", flags)
        except Exception as e:  # the previous flags stay in effect
            logger.error("Error reloading runtime settings: %s", e, exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Picture market starting up...")

    try:
        await asyncio.to_thread(Base.metadata.create_all, bind=engine)
        logger.info("Tables Users, Pictures, Histories and server_settings checked/created.")
    except Exception as e:
        logger.error("Error creating database tables: %s", e, exc_info=True)

    try:
        flags = await asyncio.to_thread(refresh_runtime_settings, True)
        logger.info("Runtime settings loaded: %s", flags)
    except Exception as e:
        logger.error("Error loading runtime settings: %s", e, exc_info=True)

    interval = settings.SETTINGS_RELOAD_INTERVAL_SECONDS
    if interval > 0:
        logger.info("Reloading runtime settings every %ss.", interval)
        app.state.settings_reload_task = asyncio.create_task(periodic_settings_reload(interval))
    else:
        logger.info("Periodic settings reload is disabled (interval <= 0).")
        app.state.settings_reload_task = None

    yield

    task = app.state.settings_reload_task
    if task and not task.done():
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Settings reload task cancelled.")
    logger.info("Picture market shut down.")
