"""
One-shot script: sync a shared voice to all active credentials, or retry
its failed pairs.

Usage:
    python -m voicesync.scripts.sync_voice sync VOICE_ID OWNER_ID --name "Narrator"
    python -m voicesync.scripts.sync_voice retry VOICE_ID OWNER_ID

Pairs already synced are skipped (the ledger is checked first). Individual
failures never abort the run; they are counted and left in the ledger as
"failed" for a later retry.
"""
import argparse
import asyncio
import logging
from typing import List, Optional

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def _run(command: str, voice_id: str, owner_id: str, name: Optional[str]) -> dict:
    from voicesync.config import get_settings
    from voicesync.db.engine import get_engine
    from voicesync.db.sync_store import SqlSyncRecordStore
    from voicesync.provider.client import VoiceProviderClient
    from voicesync.sync.voice_sync import VoiceSyncService

    settings = get_settings()
    engine = get_engine()

    async with VoiceProviderClient(
        base_url=settings.provider_base_url,
        timeout=settings.request_timeout_seconds,
    ) as client:
        service = VoiceSyncService(
            store=SqlSyncRecordStore(engine),
            client=client,
            delay_seconds=settings.sync_delay_seconds,
        )
        if command == "retry":
            counts = await service.retry_failed_syncs(voice_id, owner_id, name)
            logger.info("Retried: %d, Succeeded: %d", counts.retried, counts.succeeded)
            return {"retried": counts.retried, "succeeded": counts.succeeded}

        counts = await service.sync_voice_to_all_credentials(voice_id, owner_id, name)
        logger.info(
            "Synced: %d, Failed: %d, Skipped: %d",
            counts.synced, counts.failed, counts.skipped,
        )
        return {"synced": counts.synced, "failed": counts.failed, "skipped": counts.skipped}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync a shared voice across provider accounts")
    parser.add_argument("command", choices=["sync", "retry"])
    parser.add_argument("voice_id", help="Shared voice id")
    parser.add_argument("owner_id", help="Public owner id of the voice")
    parser.add_argument("--name", default=None, help="Display name override")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    result = asyncio.run(_run(args.command, args.voice_id, args.owner_id, args.name))
    print(" ".join(f"{k}={v}" for k, v in result.items()))


if __name__ == "__main__":
    main()
