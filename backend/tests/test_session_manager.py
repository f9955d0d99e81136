"""Tests for the in-memory rotation session manager."""

import time

import pytest

from gotnext.config import Settings
from gotnext.models.match import MatchStatus
from gotnext.services.session_manager import RotationSessionManager, SessionNotFoundError


@pytest.fixture
def manager():
    return RotationSessionManager(
        Settings(random_seed=11, session_ttl_seconds=30, session_cleanup_interval_seconds=0)
    )


class TestSessions:
    def test_create_and_get(self, manager):
        session = manager.create_session()
        assert session.session_id.startswith("sess_")
        assert manager.get_session(session.session_id) is session
        assert session.state.status == MatchStatus.WAITING

    def test_bench_depth_from_settings(self):
        manager = RotationSessionManager(Settings(bench_depth=4))
        assert len(manager.create_session().state.bench) == 4

    def test_unknown_session(self, manager):
        with pytest.raises(SessionNotFoundError) as exc_info:
            manager.get_session("sess_missing")
        assert exc_info.value.session_id == "sess_missing"

    def test_remove_session(self, manager):
        session = manager.create_session()
        assert manager.remove_session(session.session_id) is True
        assert manager.remove_session(session.session_id) is False
        with pytest.raises(SessionNotFoundError):
            manager.get_session(session.session_id)

    def test_list_sessions(self, manager):
        session = manager.create_session()
        listed = manager.list_sessions()
        assert listed == [
            {
                "session_id": session.session_id,
                "status": "waiting",
                "court_count": 0,
                "queue_length": 0,
                "bench_count": 0,
            }
        ]


class TestApply:
    def test_applied_operation_swaps_state(self, manager):
        session = manager.create_session()
        player = session.engine.new_player("Jo")

        session, applied = manager.apply(
            session.session_id, lambda engine, state: engine.join_queue(state, player)
        )

        assert applied is True
        assert session.state.match.queue == (player,)

    def test_rejected_operation_reports_not_applied(self, manager):
        session = manager.create_session()
        before = session.state

        session, applied = manager.apply(
            session.session_id, lambda engine, state: engine.end_match(state, "team1")
        )

        assert applied is False
        assert session.state is before

    def test_apply_unknown_session(self, manager):
        with pytest.raises(SessionNotFoundError):
            manager.apply("sess_missing", lambda engine, state: state)


class TestExpiry:
    def test_expired_session_not_found(self, manager):
        session = manager.create_session()
        session.last_access = time.time() - 120

        with pytest.raises(SessionNotFoundError):
            manager.get_session(session.session_id)
        assert manager.list_sessions() == []

    def test_prune_skips_locked_sessions(self, manager):
        session = manager.create_session()
        with session.lock:
            manager.prune_expired(now=time.time() + 3600)
        assert [s["session_id"] for s in manager.list_sessions()] == [session.session_id]

    def test_prune_removes_idle_sessions(self, manager):
        manager.create_session()
        manager.prune_expired(now=time.time() + 3600)
        assert manager.list_sessions() == []

    def test_get_refreshes_last_access(self, manager):
        session = manager.create_session()
        session.last_access = time.time() - 20
        manager.get_session(session.session_id)
        assert time.time() - session.last_access < 5
