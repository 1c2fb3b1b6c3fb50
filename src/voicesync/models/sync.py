"""Per-(credential, voice) sync ledger."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncStatus(str, Enum):
    SYNCED = "synced"
    FAILED = "failed"


class SyncedVoice(SQLModel, table=True):
    """Last known outcome of adding one shared voice to one credential.

    (credential_id, voice_id) is unique: later attempts update this row in
    place. error_message is only set while status is "failed".
    """

    __table_args__ = (
        UniqueConstraint("credential_id", "voice_id", name="uq_syncedvoice_credential_voice"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    credential_id: str = Field(foreign_key="providercredential.id", index=True)
    voice_id: str = Field(index=True)
    public_owner_id: str
    voice_name: Optional[str] = None
    status: str = SyncStatus.SYNCED.value  # "synced", "failed"
    error_message: Optional[str] = None
    synced_at: datetime = Field(default_factory=_utcnow)
