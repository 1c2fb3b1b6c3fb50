"""Tests for DB models."""
from datetime import timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from voicesync.models.credential import ProviderCredential
from voicesync.models.sync import SyncedVoice, SyncStatus


class TestProviderCredential:
    def test_defaults(self):
        cred = ProviderCredential(name="Primary", api_key="k")
        assert cred.is_active is True
        assert cred.id
        assert cred.updated_at is None
        assert cred.created_at is not None

    def test_created_at_is_utc_aware(self):
        assert ProviderCredential(name="Primary", api_key="k").created_at.tzinfo is timezone.utc

    def test_generated_ids_are_unique(self):
        assert ProviderCredential(name="a", api_key="k").id != ProviderCredential(name="b", api_key="k").id

    def test_persists(self, test_session: Session):
        test_session.add(ProviderCredential(id="c1", name="Primary", api_key="k", is_active=False))
        test_session.commit()
        result = test_session.get(ProviderCredential, "c1")
        assert result.name == "Primary"
        assert result.is_active is False


class TestSyncedVoice:
    def test_defaults(self):
        record = SyncedVoice(credential_id="c1", voice_id="v1", public_owner_id="o1")
        assert record.status == SyncStatus.SYNCED
        assert record.error_message is None
        assert record.voice_name is None
        assert record.synced_at is not None

    def test_synced_at_is_utc_aware(self):
        record = SyncedVoice(credential_id="c1", voice_id="v1", public_owner_id="o1")
        assert record.synced_at.tzinfo is timezone.utc

    def test_status_values(self):
        assert SyncStatus.SYNCED == "synced"
        assert SyncStatus.FAILED == "failed"

    def test_pair_is_unique(self, test_session: Session):
        test_session.add(ProviderCredential(id="c1", name="Primary", api_key="k"))
        test_session.commit()
        test_session.add(SyncedVoice(credential_id="c1", voice_id="v1", public_owner_id="o1"))
        test_session.commit()

        test_session.add(
            SyncedVoice(credential_id="c1", voice_id="v1", public_owner_id="o1", status="failed")
        )
        with pytest.raises(IntegrityError):
            test_session.commit()

    def test_same_voice_on_two_credentials(self, test_session: Session):
        test_session.add(ProviderCredential(id="c1", name="One", api_key="k1"))
        test_session.add(ProviderCredential(id="c2", name="Two", api_key="k2"))
        test_session.commit()
        test_session.add(SyncedVoice(credential_id="c1", voice_id="v1", public_owner_id="o1"))
        test_session.add(SyncedVoice(credential_id="c2", voice_id="v1", public_owner_id="o1"))
        test_session.commit()

        rows = test_session.exec(select(SyncedVoice).where(SyncedVoice.voice_id == "v1")).all()
        assert len(rows) == 2
