"""
APScheduler jobs for the periodic Meta Ads sync.

The scheduled sync walks every active project on a cron schedule. A run
that is still going when the next tick fires is not started twice
(max_instances=1), so runs never overlap.
"""
import logging
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from adsync.config import get_settings

logger = logging.getLogger(__name__)


def build_scheduler(engine) -> AsyncIOScheduler:
    """
    Create and configure the APScheduler.

    Args:
        engine: SQLAlchemy engine passed through to the orchestrator.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        _scheduled_sync,
        trigger="cron",
        hour=settings.sync_cron_hour,
        minute=settings.sync_cron_minute,
        id="scheduled_sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        kwargs={"engine": engine},
    )

    return scheduler


async def _scheduled_sync(engine) -> None:
    """
    Scheduled job: one orchestrator pass over all eligible projects.

    Catches everything so the scheduler stays alive; the next tick retries.
    """
    from adsync.sync.orchestrator import build_orchestrator

    settings = get_settings()
    logger.info("Scheduled sync starting at %s", datetime.now(timezone.utc).isoformat())

    try:
        orchestrator = build_orchestrator(engine, settings)
        report = await orchestrator.run()
        if not report.success:
            logger.error("Scheduled sync aborted: %s", report.error)
    except Exception as exc:
        logger.error("Scheduled sync failed: %s", exc)
