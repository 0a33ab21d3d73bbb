"""Result types returned by entity service operations."""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of an operation that touches the remote store.

    ``success`` reports whether the remote write went through; the local
    write has always happened by the time a result is returned. ``queued``
    is True when the record is waiting in a sync queue.
    """

    success: bool
    payload: Optional[T] = None
    queued: bool = False
    error: Optional[str] = None

    @classmethod
    def ok(cls, payload: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, payload=payload)

    @classmethod
    def failed(cls, error: str, payload: Optional[T] = None, queued: bool = False) -> "ServiceResult[T]":
        return cls(success=False, payload=payload, queued=queued, error=error)


@dataclass
class SyncResult:
    """Counts produced by draining a sync queue."""

    success: int = 0
    failed: int = 0
    skipped: int = 0

    def __add__(self, other: "SyncResult") -> "SyncResult":
        return SyncResult(
            success=self.success + other.success,
            failed=self.failed + other.failed,
            skipped=self.skipped + other.skipped,
        )

    def as_dict(self) -> dict:
        return {"success": self.success, "failed": self.failed, "skipped": self.skipped}


@dataclass
class PullResult:
    """Counts produced by merging remote records into the local cache."""

    fetched: int = 0
    added: int = 0
    errors: list = field(default_factory=list)
