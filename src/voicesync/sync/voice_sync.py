"""
VoiceSyncService — makes a shared voice exist in every active provider account.

Flow for one (voice, credential) pair:
  1. Ledger says "synced" → done, no provider call, no write
  2. POST add-shared-voice under the credential's api key
  3. Upsert the pair's SyncedVoice row with the outcome ("synced"/"failed")

Fan-out runs step 1–3 for every active credential, one at a time, with a
fixed pause between provider calls. Retry runs them only for pairs whose
row is "failed" and whose credential is still active.

No unit of work raises: every error ends up as a SyncFailure result and,
where the provider was reached or the call blew up, as a "failed" row.
Callers learn about partial failure from the returned counts or the ledger.
"""
import asyncio
import logging
from typing import List, Optional

from voicesync.db.sync_store import SyncRecordStore, SyncRecordUpsert
from voicesync.models.credential import ProviderCredential
from voicesync.models.sync import SyncedVoice, SyncStatus
from voicesync.provider.client import VoiceProviderClient
from voicesync.sync.results import (
    FanOutCounts,
    RetryCounts,
    SyncFailure,
    SyncResult,
    SyncSuccess,
)

logger = logging.getLogger(__name__)

# Provider stock voices: every account already has them, so they are never synced.
DEFAULT_VOICE_IDS = frozenset({
    "21m00Tcm4TlvDq8ikWAM",  # Rachel
    "CYw3kZ02Hs0563khs1Fj",  # Dave
    "CwhRBWXzGAHq8TQ4Fs17",  # Roger
    "IKne3meq5aSn9XLyUdCD",  # Charlie
    "SAz9YHcvj6GT2YYXdXww",  # River
    "bIHbv24MWmeRgasZH58o",  # Will
    "cgSgspJ2msm6clMCkdW9",  # Jessica
    "cjVigY5qzO86Huf0OWal",  # Eric
    "iP95p4xoKVk53GoZ742B",  # Chris
    "EXAVITQu4vr4xnSDxMaL",  # Bella
    "ErXwobaYiN019PkySvjV",  # Antoni
    "MF3mGyEYCl7XYWbV9V6O",  # Elli
    "TxGEqnHWrfWFTfGW9XjX",  # Josh
    "VR6AewLTigWG4xSOukaG",  # Arnold
    "pNInz6obpgDQGcFmaJgB",  # Adam
    "yoZ06aMxZJJ28mfd3POQ",  # Sam
    "jBpfuIE2acCO8z3wKNLl",  # Gigi
    "jsCqWAovK2LkecY7zXl4",  # Freya
})

SYNC_DELAY_SECONDS = 0.1


class VoiceSyncService:
    """Orchestrates voice → credential sync against the ledger store."""

    def __init__(
        self,
        store: SyncRecordStore,
        client: VoiceProviderClient,
        delay_seconds: float = SYNC_DELAY_SECONDS,
    ):
        """
        Args:
            store: SyncRecordStore (SqlSyncRecordStore in production).
            client: VoiceProviderClient instance (or AsyncMock in tests).
            delay_seconds: Pause after each provider call within a batch.
        """
        self.store = store
        self.client = client
        self.delay_seconds = delay_seconds

    @staticmethod
    def is_default_voice(voice_id: str) -> bool:
        return voice_id in DEFAULT_VOICE_IDS

    def is_voice_synced(self, credential_id: str, voice_id: str) -> bool:
        """True only for an existing row with status "synced"; "failed" is not synced."""
        record = self.store.find_sync_record(credential_id, voice_id)
        return record is not None and record.status == SyncStatus.SYNCED

    async def sync_voice_to_credential(
        self,
        voice_id: str,
        public_owner_id: str,
        voice_name: Optional[str],
        credential: ProviderCredential,
    ) -> SyncResult:
        """
        Add one voice to one credential's account and record the outcome.

        Returns:
            SyncSuccess (already_synced=True when the ledger short-circuited)
            or SyncFailure. Never raises.
        """
        try:
            if self.is_voice_synced(credential.id, voice_id):
                logger.info("Voice %s already synced to credential %s", voice_id, credential.id)
                return SyncSuccess(already_synced=True)
        except Exception as exc:
            logger.error("Ledger lookup failed for voice %s / credential %s: %s",
                         voice_id, credential.id, exc)
            return SyncFailure(error=_describe(exc))

        logger.info(
            "Syncing voice %s (%s) to credential %s",
            voice_id, voice_name or "unknown", credential.id,
        )

        try:
            response = await self.client.add_shared_voice(
                public_owner_id, voice_id, credential.api_key, new_name=voice_name
            )
        except Exception as exc:
            error = _describe(exc)
            logger.error("Error syncing voice %s to credential %s: %s",
                         voice_id, credential.id, error)
            self._record(voice_id, public_owner_id, voice_name, credential,
                         SyncStatus.FAILED, error)
            return SyncFailure(error=error)

        if not response.ok:
            logger.error(
                "Failed to sync voice %s to credential %s: %d - %s",
                voice_id, credential.id, response.status_code, response.text,
            )
            self._record(
                voice_id, public_owner_id, voice_name, credential,
                SyncStatus.FAILED, f"{response.status_code}: {response.text}",
            )
            return SyncFailure(error=response.text, status_code=response.status_code)

        recorded = self._record(voice_id, public_owner_id, voice_name, credential,
                                SyncStatus.SYNCED, None)
        if recorded is not None:
            return recorded

        logger.info("Voice %s synced to credential %s", voice_id, credential.id)
        return SyncSuccess()

    async def sync_voice_to_all_credentials(
        self,
        voice_id: str,
        public_owner_id: str,
        voice_name: Optional[str],
    ) -> FanOutCounts:
        """Sync a voice to every credential active at the start of the call."""
        if self.is_default_voice(voice_id):
            logger.info("Voice %s is a default voice, skipping sync", voice_id)
            return FanOutCounts(skipped=1)

        credentials = self.store.list_active_credentials()
        if not credentials:
            logger.warning("No active provider credentials found for voice sync")
            return FanOutCounts()

        logger.info("Starting sync of voice %s to %d credentials", voice_id, len(credentials))

        counts = FanOutCounts()
        for credential in credentials:
            result = await self.sync_voice_to_credential(
                voice_id, public_owner_id, voice_name, credential
            )
            if result.success:
                counts.synced += 1
            else:
                counts.failed += 1
            await asyncio.sleep(self.delay_seconds)

        logger.info("Voice %s sync complete: %d synced, %d failed",
                    voice_id, counts.synced, counts.failed)
        return counts

    async def retry_failed_syncs(
        self,
        voice_id: str,
        public_owner_id: str,
        voice_name: Optional[str],
    ) -> RetryCounts:
        """Re-attempt the voice's failed pairs on still-active credentials."""
        failed = self.store.list_failed_with_credential(voice_id)

        counts = RetryCounts()
        for _record, credential in failed:
            counts.retried += 1
            result = await self.sync_voice_to_credential(
                voice_id, public_owner_id, voice_name, credential
            )
            if result.success:
                counts.succeeded += 1
            await asyncio.sleep(self.delay_seconds)

        logger.info("Retried %d failed syncs for voice %s, %d succeeded",
                    counts.retried, voice_id, counts.succeeded)
        return counts

    async def retry_all_failed(self) -> RetryCounts:
        """Run retry_failed_syncs for every voice with a retryable failure."""
        total = RetryCounts()
        for voice in self.store.list_failed_voices():
            counts = await self.retry_failed_syncs(
                voice.voice_id, voice.public_owner_id, voice.voice_name
            )
            total.retried += counts.retried
            total.succeeded += counts.succeeded
        return total

    def get_synced_voices_for_credential(self, credential_id: str) -> List[SyncedVoice]:
        return self.store.list_for_credential(credential_id)

    def get_voice_sync_status(self, voice_id: str) -> List[SyncedVoice]:
        return self.store.list_for_voice(voice_id)

    # ─── Internal helpers ─────────────────────────────────────────────────────

    def _record(
        self,
        voice_id: str,
        public_owner_id: str,
        voice_name: Optional[str],
        credential: ProviderCredential,
        status: SyncStatus,
        error_message: Optional[str],
    ) -> Optional[SyncFailure]:
        """Upsert the pair's outcome. Returns a SyncFailure if the write itself failed."""
        try:
            self.store.upsert_sync_record(
                SyncRecordUpsert(
                    credential_id=credential.id,
                    voice_id=voice_id,
                    public_owner_id=public_owner_id,
                    voice_name=voice_name,
                    status=status,
                    error_message=error_message,
                )
            )
        except Exception as exc:
            logger.error("Could not record %s for voice %s / credential %s: %s",
                         status.value, voice_id, credential.id, exc)
            return SyncFailure(error=_describe(exc))
        return None


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__
