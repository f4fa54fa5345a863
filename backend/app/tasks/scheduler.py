"""Background task scheduler for periodic remote reloads."""

import logging
from datetime import UTC, datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import get_settings
from app.services.board import BoardService, get_board_service

logger = logging.getLogger(__name__)
settings = get_settings()

# Global scheduler instance
scheduler: AsyncIOScheduler | None = None


async def reload_board_job(board: BoardService | None = None) -> None:
    """
    Background job reloading the board from the remote tables.

    Covers change notifications that never arrived; a failed reload keeps the
    local board and waits for the next run.
    """
    board = board or get_board_service()
    logger.info("Starting scheduled board reload")
    try:
        reloaded = await board.reload()
        logger.info(f"Scheduled reload {'complete' if reloaded else 'skipped'}: version={board.version}")
    except Exception as e:
        logger.error(f"Scheduled reload failed: {e}", exc_info=True)


def setup_scheduler() -> AsyncIOScheduler | None:
    """Set up and start the scheduler when remote sync is configured."""
    global scheduler

    if not settings.remote_enabled or settings.reload_interval_minutes <= 0:
        logger.info("Periodic reload disabled")
        return None

    scheduler = AsyncIOScheduler()

    # First run shortly after startup; the lifespan already did an initial reload
    scheduler.add_job(
        reload_board_job,
        trigger=IntervalTrigger(minutes=settings.reload_interval_minutes),
        next_run_time=datetime.now(UTC) + timedelta(minutes=settings.reload_interval_minutes),
        id="reload_board",
        name="Reload board from remote tables",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started")

    return scheduler


def shutdown_scheduler() -> None:
    """Shut down the scheduler gracefully."""
    global scheduler

    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
        scheduler = None
