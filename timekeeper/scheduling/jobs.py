"""APScheduler integration for periodic background checks.

Provides scheduler setup, job management, and FastAPI lifespan
integration for the scheduled-meeting alert scan and analytics autosave.
"""

from contextlib import asynccontextmanager
from datetime import UTC
from typing import TYPE_CHECKING

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from timekeeper.config import settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = structlog.get_logger()

ALERT_JOB_ID = "meeting_alert_scanner"
AUTOSAVE_JOB_ID = "analytics_autosave"

# Module-level scheduler instance
_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance.

    Returns:
        AsyncIOScheduler instance
    """
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone=UTC)
    return _scheduler


def reset_scheduler() -> None:
    """Reset the scheduler instance (for testing)."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None


@asynccontextmanager
async def background_jobs_lifespan() -> "AsyncGenerator[None, None]":
    """Lifespan context manager for background jobs.

    Starts the scheduler with the alert scan (default every minute) and
    analytics autosave (default every 30 seconds). Shuts down cleanly
    on exit.

    Usage:
        async with background_jobs_lifespan():
            # Scheduler is running
            yield
        # Scheduler stopped
    """
    scheduler = get_scheduler()

    scheduler.add_job(
        check_scheduled_meetings,
        "interval",
        seconds=settings.alert_check_interval_seconds,
        id=ALERT_JOB_ID,
        replace_existing=True,
        max_instances=1,  # Prevent overlap if job runs long
    )
    scheduler.add_job(
        autosave,
        "interval",
        seconds=settings.autosave_interval_seconds,
        id=AUTOSAVE_JOB_ID,
        replace_existing=True,
        max_instances=1,
    )

    logger.info("Starting background scheduler")
    scheduler.start()

    try:
        yield
    finally:
        logger.info("Shutting down background scheduler")
        scheduler.shutdown(wait=False)


async def check_scheduled_meetings() -> None:
    """Scheduled job: alert meetings whose start time has arrived."""
    from timekeeper.controller import Timekeeper

    try:
        timekeeper = Timekeeper.get_instance()
        alerted = await timekeeper.check_scheduled_meetings()
        if alerted:
            logger.info("Meetings alerted", count=len(alerted))
    except RuntimeError as e:
        # Timekeeper not initialized yet
        logger.warning("Timekeeper not ready", error=str(e))
    except Exception as e:
        logger.error("Meeting alert scan failed", error=str(e))


async def autosave() -> None:
    """Scheduled job: mirror analytics and settings to storage."""
    from timekeeper.controller import Timekeeper

    try:
        await Timekeeper.get_instance().save_all_data()
    except RuntimeError as e:
        logger.warning("Timekeeper not ready", error=str(e))
    except Exception as e:
        logger.error("Autosave failed", error=str(e))
