"""Models for the remote queue service mirror."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class RemoteQueueEntry:
    """A named entry in the remote queue service."""

    id: int
    name: str


@dataclass
class RemoteQueueResult(Generic[T]):
    """Outcome of a remote call: ``data`` on success, ``error`` otherwise."""

    data: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
