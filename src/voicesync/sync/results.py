"""Result values returned by VoiceSyncService.

A unit of work never raises; it returns SyncSuccess or SyncFailure and
the batch loops only branch on ``.success``.
"""
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class SyncSuccess:
    already_synced: bool = False

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class SyncFailure:
    error: str
    status_code: Optional[int] = None  # None for transport/unexpected errors

    @property
    def success(self) -> bool:
        return False


SyncResult = Union[SyncSuccess, SyncFailure]


@dataclass
class FanOutCounts:
    synced: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass
class RetryCounts:
    retried: int = 0
    succeeded: int = 0
