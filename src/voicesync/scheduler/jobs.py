"""
APScheduler jobs for background reconciliation.

A nightly sweep retries every failed (credential, voice) pair whose
credential is still active, so provider outages heal without anyone
calling the retry endpoint.

The scheduler runs in the process started by `python -m voicesync`.
"""
import logging
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from voicesync.config import get_settings

logger = logging.getLogger(__name__)


def build_scheduler(engine) -> AsyncIOScheduler:
    """
    Create and configure the APScheduler.

    Args:
        engine: SQLAlchemy engine backing the sync ledger.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        _nightly_retry,
        trigger="cron",
        hour=settings.retry_sweep_hour,
        minute=0,
        id="nightly_retry",
        replace_existing=True,
        kwargs={"engine": engine},
    )

    return scheduler


async def _nightly_retry(engine) -> None:
    """
    Nightly job: retry all failed voice syncs.

    Idempotent: pairs already synced are skipped by the service.
    """
    from voicesync.db.sync_store import SqlSyncRecordStore
    from voicesync.provider.client import VoiceProviderClient
    from voicesync.sync.voice_sync import VoiceSyncService

    settings = get_settings()
    logger.info("Nightly retry starting at %s", datetime.now(timezone.utc).isoformat())

    try:
        async with VoiceProviderClient(
            base_url=settings.provider_base_url,
            timeout=settings.request_timeout_seconds,
        ) as client:
            service = VoiceSyncService(
                store=SqlSyncRecordStore(engine),
                client=client,
                delay_seconds=settings.sync_delay_seconds,
            )
            counts = await service.retry_all_failed()
        logger.info(
            "Nightly retry done: %d retried, %d succeeded",
            counts.retried, counts.succeeded,
        )

    except Exception as exc:
        logger.error("Nightly retry failed: %s", exc)
