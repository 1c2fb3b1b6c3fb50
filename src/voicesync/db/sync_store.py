"""
Sync ledger store: the only place that reads or writes SyncedVoice rows.

VoiceSyncService depends on the SyncRecordStore protocol, not on this
module's engine handling, so tests can pass any object with the same
methods.

Upserts are a single INSERT ... ON CONFLICT (credential_id, voice_id)
DO UPDATE statement. Two concurrent attempts for the same pair therefore
can never produce two rows; whichever commits last wins.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from voicesync.models.credential import ProviderCredential
from voicesync.models.sync import SyncedVoice, SyncStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncRecordUpsert:
    """Values written for one sync attempt."""

    credential_id: str
    voice_id: str
    public_owner_id: str
    voice_name: Optional[str]
    status: SyncStatus
    error_message: Optional[str] = None


@dataclass(frozen=True)
class FailedVoice:
    """A voice with at least one failed pair on an active credential."""

    voice_id: str
    public_owner_id: str
    voice_name: Optional[str]


class SyncRecordStore(Protocol):
    def upsert_sync_record(self, record: SyncRecordUpsert) -> None: ...

    def find_sync_record(self, credential_id: str, voice_id: str) -> Optional[SyncedVoice]: ...

    def list_active_credentials(self) -> List[ProviderCredential]: ...

    def list_failed_with_credential(
        self, voice_id: str
    ) -> List[Tuple[SyncedVoice, ProviderCredential]]: ...

    def list_for_credential(self, credential_id: str) -> List[SyncedVoice]: ...

    def list_for_voice(self, voice_id: str) -> List[SyncedVoice]: ...

    def list_failed_voices(self) -> List[FailedVoice]: ...


_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlSyncRecordStore:
    """SyncRecordStore backed by a SQLModel engine (SQLite or PostgreSQL)."""

    def __init__(self, engine):
        """
        Args:
            engine: SQLAlchemy engine (SQLModel create_engine result).
        """
        self.engine = engine

    def upsert_sync_record(self, record: SyncRecordUpsert) -> None:
        """Insert the pair's row, or overwrite the outcome of the existing one."""
        insert = _DIALECT_INSERTS.get(self.engine.dialect.name)
        if insert is None:
            raise NotImplementedError(
                f"Upsert not supported for dialect {self.engine.dialect.name!r}"
            )

        status = SyncStatus(record.status)
        # A synced pair never carries a stale error
        error_message = None if status is SyncStatus.SYNCED else record.error_message
        now = datetime.now(timezone.utc)

        stmt = insert(SyncedVoice.__table__).values(
            credential_id=record.credential_id,
            voice_id=record.voice_id,
            public_owner_id=record.public_owner_id,
            voice_name=record.voice_name,
            status=status.value,
            error_message=error_message,
            synced_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["credential_id", "voice_id"],
            set_={
                "public_owner_id": record.public_owner_id,
                "voice_name": record.voice_name,
                "status": status.value,
                "error_message": error_message,
                "synced_at": now,
            },
        )
        with self.engine.begin() as conn:
            conn.execute(stmt)

    def find_sync_record(self, credential_id: str, voice_id: str) -> Optional[SyncedVoice]:
        with Session(self.engine) as s:
            return s.exec(
                select(SyncedVoice).where(
                    SyncedVoice.credential_id == credential_id,
                    SyncedVoice.voice_id == voice_id,
                )
            ).first()

    def list_active_credentials(self) -> List[ProviderCredential]:
        with Session(self.engine) as s:
            return list(
                s.exec(
                    select(ProviderCredential)
                    .where(ProviderCredential.is_active == True)  # noqa: E712
                    .order_by(ProviderCredential.created_at, ProviderCredential.id)
                ).all()
            )

    def list_failed_with_credential(
        self, voice_id: str
    ) -> List[Tuple[SyncedVoice, ProviderCredential]]:
        """Failed rows for the voice whose credential is still active."""
        with Session(self.engine) as s:
            rows = s.exec(
                select(SyncedVoice, ProviderCredential)
                .join(ProviderCredential, SyncedVoice.credential_id == ProviderCredential.id)
                .where(
                    SyncedVoice.voice_id == voice_id,
                    SyncedVoice.status == SyncStatus.FAILED.value,
                    ProviderCredential.is_active == True,  # noqa: E712
                )
                .order_by(ProviderCredential.created_at, ProviderCredential.id)
            ).all()
            return [(record, credential) for record, credential in rows]

    def list_for_credential(self, credential_id: str) -> List[SyncedVoice]:
        with Session(self.engine) as s:
            return list(
                s.exec(
                    select(SyncedVoice)
                    .where(SyncedVoice.credential_id == credential_id)
                    .order_by(SyncedVoice.voice_id)
                ).all()
            )

    def list_for_voice(self, voice_id: str) -> List[SyncedVoice]:
        with Session(self.engine) as s:
            return list(
                s.exec(
                    select(SyncedVoice)
                    .where(SyncedVoice.voice_id == voice_id)
                    .order_by(SyncedVoice.credential_id)
                ).all()
            )

    def list_failed_voices(self) -> List[FailedVoice]:
        """One entry per voice that has a failed pair on an active credential."""
        with Session(self.engine) as s:
            rows = s.exec(
                select(
                    SyncedVoice.voice_id,
                    func.max(SyncedVoice.public_owner_id),
                    func.max(SyncedVoice.voice_name),
                )
                .join(ProviderCredential, SyncedVoice.credential_id == ProviderCredential.id)
                .where(
                    SyncedVoice.status == SyncStatus.FAILED.value,
                    ProviderCredential.is_active == True,  # noqa: E712
                )
                .group_by(SyncedVoice.voice_id)
                .order_by(SyncedVoice.voice_id)
            ).all()
        return [
            FailedVoice(voice_id=voice_id, public_owner_id=owner_id, voice_name=name)
            for voice_id, owner_id, name in rows
        ]
