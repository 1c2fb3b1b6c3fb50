"""Voice sync trigger, retry and ledger query routes."""
from datetime import datetime
from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from voicesync.config import get_settings
from voicesync.db.sync_store import SqlSyncRecordStore
from voicesync.provider.client import VoiceProviderClient
from voicesync.sync.voice_sync import VoiceSyncService

router = APIRouter()


class VoiceSyncRequest(BaseModel):
    voice_id: str = Field(min_length=1)
    public_owner_id: str = Field(min_length=1)
    voice_name: Optional[str] = None


class FanOutResponse(BaseModel):
    success: bool = True
    synced: int
    failed: int
    skipped: int
    message: str


class RetryResponse(BaseModel):
    success: bool = True
    retried: int
    succeeded: int
    message: str


class SyncRecordRead(BaseModel):
    """Ledger row as exposed over HTTP (no credential secrets)."""

    model_config = ConfigDict(from_attributes=True)

    credential_id: str
    voice_id: str
    public_owner_id: str
    voice_name: Optional[str]
    status: str
    error_message: Optional[str]
    synced_at: Optional[datetime]


class PairStatusResponse(BaseModel):
    voice_id: str
    credential_id: str
    synced: bool


async def get_provider_client() -> AsyncIterator[VoiceProviderClient]:
    """Per-request provider client, closed after the response."""
    settings = get_settings()
    client = VoiceProviderClient(
        base_url=settings.provider_base_url,
        timeout=settings.request_timeout_seconds,
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_sync_service(
    request: Request,
    client: VoiceProviderClient = Depends(get_provider_client),
) -> VoiceSyncService:
    return VoiceSyncService(
        store=SqlSyncRecordStore(request.app.state.engine),
        client=client,
        delay_seconds=get_settings().sync_delay_seconds,
    )


@router.post("/sync", response_model=FanOutResponse)
async def sync_voice(
    body: VoiceSyncRequest,
    service: VoiceSyncService = Depends(get_sync_service),
):
    """Sync a shared voice to every active credential. Runs to completion."""
    counts = await service.sync_voice_to_all_credentials(
        body.voice_id, body.public_owner_id, body.voice_name
    )
    return FanOutResponse(
        synced=counts.synced,
        failed=counts.failed,
        skipped=counts.skipped,
        message=(
            f"Voice synced: {counts.synced} succeeded, "
            f"{counts.failed} failed, {counts.skipped} skipped"
        ),
    )


@router.post("/retry", response_model=RetryResponse)
async def retry_voice_sync(
    body: VoiceSyncRequest,
    service: VoiceSyncService = Depends(get_sync_service),
):
    """Retry the voice's failed syncs on still-active credentials."""
    counts = await service.retry_failed_syncs(
        body.voice_id, body.public_owner_id, body.voice_name
    )
    return RetryResponse(
        retried=counts.retried,
        succeeded=counts.succeeded,
        message=f"Retried {counts.retried} failed syncs, {counts.succeeded} succeeded",
    )


@router.get("/credentials/{credential_id}", response_model=List[SyncRecordRead])
def synced_voices_for_credential(
    credential_id: str,
    service: VoiceSyncService = Depends(get_sync_service),
):
    """All ledger rows for one credential."""
    return service.get_synced_voices_for_credential(credential_id)


@router.get("/{voice_id}/status", response_model=List[SyncRecordRead])
def voice_sync_status(
    voice_id: str,
    service: VoiceSyncService = Depends(get_sync_service),
):
    """All ledger rows for one voice, one per credential attempted."""
    return service.get_voice_sync_status(voice_id)


@router.get("/{voice_id}/credentials/{credential_id}", response_model=PairStatusResponse)
def voice_synced_to_credential(
    voice_id: str,
    credential_id: str,
    service: VoiceSyncService = Depends(get_sync_service),
):
    return PairStatusResponse(
        voice_id=voice_id,
        credential_id=credential_id,
        synced=service.is_voice_synced(credential_id, voice_id),
    )
