"""
Main entrypoint: starts the APScheduler retry sweep in one process.

FastAPI runs separately under uvicorn.

Usage:
    python -m voicesync                # starts the scheduler
    python -m voicesync sync ...       # one-shot sync (see scripts/sync_voice.py)
    python -m voicesync retry ...      # one-shot retry
    uvicorn voicesync.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


async def _run_scheduler() -> None:
    from voicesync.config import get_settings
    from voicesync.db.engine import get_engine
    from voicesync.scheduler.jobs import build_scheduler

    settings = get_settings()
    engine = get_engine()

    scheduler = build_scheduler(engine)
    scheduler.start()
    logger.info(
        "Scheduler started (nightly retry at %02d:00 UTC). Press Ctrl+C to stop.",
        settings.retry_sweep_hour,
    )

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown()
        logger.info("Goodbye.")


if __name__ == "__main__":
    # `python -m voicesync sync|retry ...` or just `python -m voicesync`
    if len(sys.argv) > 1 and sys.argv[1] in ("sync", "retry"):
        from voicesync.scripts.sync_voice import main
        main(sys.argv[1:])
    else:
        asyncio.run(_run_scheduler())
