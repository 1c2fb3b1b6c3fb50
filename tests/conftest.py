"""Shared test fixtures."""
from typing import Generator, Iterable, List
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from voicesync.models.credential import ProviderCredential
from voicesync.models.sync import SyncedVoice  # noqa: F401
from voicesync.db.sync_store import SqlSyncRecordStore
from voicesync.provider.client import ProviderResponse


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(engine) -> SqlSyncRecordStore:
    return SqlSyncRecordStore(engine)


def add_credentials(engine, ids: Iterable[str], active: bool = True) -> List[ProviderCredential]:
    """Persist one credential per id, api key "key-<id>"."""
    creds = []
    with Session(engine) as s:
        for cid in ids:
            cred = ProviderCredential(
                id=cid, name=f"Account {cid}", api_key=f"key-{cid}", is_active=active
            )
            s.add(cred)
            creds.append(cred)
        s.commit()
        for cred in creds:
            s.refresh(cred)
    return creds


def provider_mock(fail_keys: Iterable[str] = ()) -> AsyncMock:
    """A provider client whose add_shared_voice fails (HTTP 400) for the given api keys."""
    failing = set(fail_keys)

    async def _add(public_owner_id, voice_id, api_key, new_name=None):
        if api_key in failing:
            return ProviderResponse(status_code=400, text="voice_limit_reached")
        return ProviderResponse(status_code=200, text='{"voice_id": "%s"}' % voice_id)

    client = AsyncMock()
    client.add_shared_voice = AsyncMock(side_effect=_add)
    return client


@pytest.fixture(name="add_creds")
def add_creds_fixture(engine):
    """add_creds(["a", "b"], active=True) → persisted ProviderCredential list."""
    return lambda ids, active=True: add_credentials(engine, ids, active=active)


@pytest.fixture(name="make_provider")
def make_provider_fixture():
    """make_provider(fail_keys=["key-b"]) → mock VoiceProviderClient."""
    return provider_mock
