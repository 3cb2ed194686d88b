"""
Main entrypoint: runs the APScheduler-driven scheduled sync.

FastAPI runs separately under uvicorn (manual triggers, sync history).

Usage:
    python -m adsync run [--project-id N]   # one sync pass, then exit
    python -m adsync                        # starts the scheduler
    uvicorn adsync.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def _run_once(argv) -> int:
    from adsync.scripts.run_sync import main
    return main(argv)


async def _run_scheduler() -> None:
    from adsync.config import get_settings
    from adsync.db.engine import get_engine
    from adsync.scheduler.jobs import build_scheduler

    settings = get_settings()
    engine = get_engine()

    if not settings.meta_access_token:
        logger.error("META_ACCESS_TOKEN is not set. Scheduled runs will abort until it is.")

    scheduler = build_scheduler(engine)
    scheduler.start()
    logger.info(
        "Scheduler started (sync at hour=%s minute=%02d UTC, windows %s)",
        settings.sync_cron_hour,
        settings.sync_cron_minute,
        settings.window_days,
    )

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown()
        logger.info("Goodbye.")


if __name__ == "__main__":
    # Dispatch on first argument: `python -m adsync run ...` or just `python -m adsync`
    if len(sys.argv) > 1 and sys.argv[1] == "run":
        sys.exit(_run_once(sys.argv[2:]))
    else:
        asyncio.run(_run_scheduler())
