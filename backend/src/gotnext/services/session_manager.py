"""In-memory hosting of rotation sessions.

The manager is the single point of mutation: callers hand it an operation
``(engine, state) -> state`` and it swaps the result in under the
session's lock.
"""

import logging
import random
import threading
import time
import uuid
from typing import Callable

from gotnext.config import Settings
from gotnext.models.rotation import RotationState
from gotnext.models.session import RotationSession
from gotnext.services.rotation_engine import RotationEngine

logger = logging.getLogger(__name__)

Operation = Callable[[RotationEngine, RotationState], RotationState]


class SessionNotFoundError(LookupError):
    """Raised when a session id is unknown or has expired."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class RotationSessionManager:
    """Keeps each hosted court's engine and current snapshot."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._sessions: dict[str, RotationSession] = {}
        self._sessions_lock = threading.Lock()
        self._cleanup_lock = threading.Lock()
        self._last_cleanup = 0.0

    def _build_engine(self) -> RotationEngine:
        rng = random.Random(self.settings.random_seed)
        return RotationEngine(bench_depth=self.settings.bench_depth, rng=rng)

    def create_session(self) -> RotationSession:
        """Start a new court with an empty rotation."""
        self.prune_expired()
        engine = self._build_engine()
        session = RotationSession(
            session_id=f"sess_{uuid.uuid4().hex[:12]}",
            engine=engine,
            state=engine.create_session(),
        )
        with self._sessions_lock:
            self._sessions[session.session_id] = session
        logger.info(f"Created rotation session {session.session_id}")
        return session

    def get_session(self, session_id: str) -> RotationSession:
        """Fetch a live session and mark it as used.

        Raises:
            SessionNotFoundError: If the session does not exist or has expired
        """
        self.prune_expired()
        with self._sessions_lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        now = time.time()
        if session.is_expired(now, self.settings.session_ttl_seconds):
            self.remove_session(session_id)
            raise SessionNotFoundError(session_id)
        session.touch(now)
        return session

    def apply(self, session_id: str, operation: Operation) -> tuple[RotationSession, bool]:
        """Run ``operation`` against the session's current snapshot.

        Returns:
            (session, applied) where ``applied`` is False when the engine
            handed back the unchanged snapshot
        """
        session = self.get_session(session_id)
        with session.lock:
            previous = session.state
            session.state = operation(session.engine, previous)
            applied = session.state is not previous
        return session, applied

    def remove_session(self, session_id: str) -> bool:
        """Drop a session. Returns False if it was already gone."""
        with self._sessions_lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"Removed rotation session {session_id}")
        return removed is not None

    def list_sessions(self) -> list[dict]:
        """List all active sessions (for debugging)."""
        with self._sessions_lock:
            sessions = list(self._sessions.values())
        return [
            {
                "session_id": s.session_id,
                "status": s.state.status.value,
                "court_count": s.state.match.court_count,
                "queue_length": len(s.state.match.queue),
                "bench_count": s.state.bench_player_count,
            }
            for s in sessions
        ]

    def prune_expired(self, now: float | None = None) -> None:
        """Remove expired sessions opportunistically."""
        now = now or time.time()
        if now - self._last_cleanup < self.settings.session_cleanup_interval_seconds:
            return

        with self._cleanup_lock:
            if now - self._last_cleanup < self.settings.session_cleanup_interval_seconds:
                return

            with self._sessions_lock:
                expired = [
                    session_id
                    for session_id, session in self._sessions.items()
                    if not session.lock.locked()
                    and session.is_expired(now, self.settings.session_ttl_seconds)
                ]
                for session_id in expired:
                    self._sessions.pop(session_id, None)

            if expired:
                logger.info(f"Pruned {len(expired)} expired rotation session(s)")
            self._last_cleanup = now
