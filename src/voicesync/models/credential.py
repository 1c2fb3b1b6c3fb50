"""Voice-provider account credentials (the fan-out targets)."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProviderCredential(SQLModel, table=True):
    """One row per voice-provider account the pool can use.

    Lifecycle belongs to account management; this service only reads rows
    with ``is_active`` set.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str  # friendly label, e.g. "Primary Account"
    api_key: str
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None
