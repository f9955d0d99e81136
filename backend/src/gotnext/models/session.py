"""Models for hosted rotation sessions."""

import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gotnext.models.rotation import RotationState

if TYPE_CHECKING:
    from gotnext.services.rotation_engine import RotationEngine


@dataclass
class RotationSession:
    """State for one hosted court: its engine and the current snapshot."""

    session_id: str
    engine: "RotationEngine"
    state: RotationState
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return (now - self.last_access) >= ttl_seconds

    def touch(self, now: float | None = None) -> None:
        self.last_access = now or time.time()
