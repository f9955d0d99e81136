"""Tests for rotation API routes."""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from gotnext.api.routes import rotation as rotation_routes
from gotnext.config import Settings
from gotnext.main import app
from gotnext.models.remote_queue import RemoteQueueResult
from gotnext.services.remote_queue_client import MockRemoteQueueClient
from gotnext.services.session_manager import RotationSessionManager

pytestmark = pytest.mark.anyio


@pytest.fixture
async def client():
    """Create async test client with a fresh session manager."""
    app.state.session_manager = RotationSessionManager(Settings(_env_file=None, random_seed=5))
    if hasattr(app.state, "remote_queue"):
        delattr(app.state, "remote_queue")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def remote_queue(monkeypatch):
    """Enable remote mirroring against the in-memory client."""
    monkeypatch.setattr(rotation_routes.settings, "enable_remote_queue", True)
    mock = MockRemoteQueueClient()
    app.state.remote_queue = mock
    return mock


async def _new_session(client) -> str:
    response = await client.post("/api/rotation/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


async def _fill_court(client, session_id):
    for team_id in ("team1", "team2"):
        for i in range(5):
            response = await client.post(
                f"/api/rotation/sessions/{session_id}/court/{team_id}/players",
                json={"name": f"{team_id}-{i}"},
            )
            assert response.json()["applied"] is True
    return response.json()["state"]


class TestSessions:
    """Tests for session lifecycle endpoints."""

    async def test_create_session(self, client):
        """New sessions start waiting with an empty court and three bench teams."""
        response = await client.post("/api/rotation/sessions")

        assert response.status_code == 201
        data = response.json()
        assert data["session_id"].startswith("sess_")
        match = data["state"]["match"]
        assert match["status"] == "waiting"
        assert match["team1"]["players"] == [None] * 5
        assert match["team2"]["color"] == "#F44336"
        assert match["queue"] == []
        assert match["started_at"] is None
        assert [t["name"] for t in data["state"]["bench"]] == ["Team 3", "Team 4", "Team 5"]

    async def test_get_session(self, client):
        session_id = await _new_session(client)
        response = await client.get(f"/api/rotation/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    async def test_get_unknown_session(self, client):
        response = await client.get("/api/rotation/sessions/sess_nope")
        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"

    async def test_list_sessions(self, client):
        session_id = await _new_session(client)
        response = await client.get("/api/rotation/sessions")
        assert [s["session_id"] for s in response.json()["sessions"]] == [session_id]

    async def test_end_session(self, client):
        session_id = await _new_session(client)

        response = await client.delete(f"/api/rotation/sessions/{session_id}")

        assert response.json() == {"status": "ended"}
        assert (await client.get(f"/api/rotation/sessions/{session_id}")).status_code == 404


class TestPlacement:
    """Tests for court and bench placement endpoints."""

    async def test_add_court_player(self, client):
        session_id = await _new_session(client)

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/court/team1/players",
            json={"name": "Alice", "position": 2},
        )

        data = response.json()
        assert data["applied"] is True
        player = data["state"]["match"]["team1"]["players"][2]
        assert player["name"] == "Alice"
        assert player["id"].startswith("player_")
        assert data["state"]["match"]["court_count"] == 1

    async def test_tenth_player_makes_ready(self, client):
        session_id = await _new_session(client)
        state = await _fill_court(client, session_id)
        assert state["match"]["status"] == "ready"

    async def test_full_team_not_applied(self, client):
        session_id = await _new_session(client)
        await _fill_court(client, session_id)

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/court/team2/players", json={"name": "Extra"}
        )

        assert response.status_code == 200
        assert response.json()["applied"] is False

    async def test_unknown_court_team(self, client):
        session_id = await _new_session(client)
        response = await client.post(
            f"/api/rotation/sessions/{session_id}/court/team3/players", json={"name": "A"}
        )
        assert response.status_code == 422

    async def test_blank_name(self, client):
        session_id = await _new_session(client)
        response = await client.post(
            f"/api/rotation/sessions/{session_id}/court/team1/players", json={"name": "   "}
        )
        assert response.status_code == 422

    async def test_add_bench_player(self, client):
        session_id = await _new_session(client)

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/bench/1/players", json={"name": "Next"}
        )

        bench = response.json()["state"]["bench"]
        assert bench[1]["players"][0]["name"] == "Next"
        assert bench[1]["player_count"] == 1

    async def test_bench_index_out_of_range(self, client):
        session_id = await _new_session(client)
        response = await client.post(
            f"/api/rotation/sessions/{session_id}/bench/3/players", json={"name": "Far"}
        )
        assert response.json()["applied"] is False

    async def test_negative_bench_index(self, client):
        session_id = await _new_session(client)
        response = await client.post(
            f"/api/rotation/sessions/{session_id}/bench/-1/players", json={"name": "Neg"}
        )
        assert response.status_code == 400

    async def test_unknown_session(self, client):
        response = await client.post(
            "/api/rotation/sessions/sess_nope/court/team1/players", json={"name": "A"}
        )
        assert response.status_code == 404


class TestMatchFlow:
    """Tests for start/end/substitute/remove endpoints."""

    async def test_start_and_end_with_empty_bench(self, client):
        session_id = await _new_session(client)
        await _fill_court(client, session_id)

        started = await client.post(f"/api/rotation/sessions/{session_id}/match/start")
        assert started.json()["state"]["match"]["status"] == "in-progress"
        assert started.json()["state"]["match"]["started_at"] is not None

        ended = await client.post(
            f"/api/rotation/sessions/{session_id}/match/end", json={"winner": "team1"}
        )

        match = ended.json()["state"]["match"]
        assert ended.json()["applied"] is True
        assert match["status"] == "waiting"
        assert match["winner"] == "team1"
        assert match["team2"]["players"] == [None] * 5
        assert match["team1"]["player_count"] == 5

    async def test_end_promotes_bench_team(self, client):
        session_id = await _new_session(client)
        await _fill_court(client, session_id)
        for i in range(5):
            await client.post(
                f"/api/rotation/sessions/{session_id}/bench/0/players", json={"name": f"N{i}"}
            )
        await client.post(f"/api/rotation/sessions/{session_id}/match/start")

        ended = await client.post(
            f"/api/rotation/sessions/{session_id}/match/end", json={"winner": "team2"}
        )

        state = ended.json()["state"]
        assert [p["name"] for p in state["match"]["team1"]["players"]] == [f"N{i}" for i in range(5)]
        assert state["match"]["team1"]["name"] == "Team 1"
        assert state["match"]["status"] == "ready"
        assert state["bench"][0]["player_count"] == 0

    async def test_end_without_game_not_applied(self, client):
        session_id = await _new_session(client)
        response = await client.post(
            f"/api/rotation/sessions/{session_id}/match/end", json={"winner": "team1"}
        )
        assert response.json()["applied"] is False

    async def test_end_invalid_winner(self, client):
        session_id = await _new_session(client)
        response = await client.post(
            f"/api/rotation/sessions/{session_id}/match/end", json={"winner": "team3"}
        )
        assert response.status_code == 422

    async def test_substitute(self, client):
        session_id = await _new_session(client)
        state = await _fill_court(client, session_id)
        outgoing = state["match"]["team1"]["players"][3]

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/players/{outgoing['id']}/substitute",
            json={"name": "Fresh"},
        )

        players = response.json()["state"]["match"]["team1"]["players"]
        assert players[3]["name"] == "Fresh"
        assert players[3]["id"] != outgoing["id"]

    async def test_remove_player(self, client):
        session_id = await _new_session(client)
        state = await _fill_court(client, session_id)
        leaving = state["match"]["team2"]["players"][0]

        response = await client.delete(
            f"/api/rotation/sessions/{session_id}/players/{leaving['id']}"
        )

        match = response.json()["state"]["match"]
        assert response.json()["applied"] is True
        assert match["status"] == "waiting"
        assert match["court_count"] == 9
        assert match["team2"]["players"][0] is None

    async def test_remove_unknown_player(self, client):
        session_id = await _new_session(client)
        response = await client.delete(f"/api/rotation/sessions/{session_id}/players/player_0")
        assert response.json()["applied"] is False


class TestQueue:
    """Tests for the queue endpoint."""

    async def test_join_queue(self, client):
        session_id = await _new_session(client)

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/queue", json={"name": "Waiting"}
        )

        data = response.json()
        assert data["applied"] is True
        assert data["state"]["match"]["queue"][0]["id"] == data["player_id"]
        assert "remote_id" not in data["state"]["match"]["queue"][0]

    async def test_tenth_join_seeds_court(self, client):
        session_id = await _new_session(client)
        for i in range(10):
            response = await client.post(
                f"/api/rotation/sessions/{session_id}/queue", json={"name": f"P{i}"}
            )

        match = response.json()["state"]["match"]
        assert match["status"] == "ready"
        assert match["court_count"] == 10
        assert match["queue"] == []

    async def test_join_mirrors_to_remote_queue(self, client, remote_queue):
        session_id = await _new_session(client)

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/queue", json={"name": "Mirror"}
        )

        queued = response.json()["state"]["match"]["queue"][0]
        assert queued["remote_id"] == 1
        assert [e.name for e in remote_queue.entries.values()] == ["Mirror"]

    async def test_remove_deletes_remote_entry(self, client, remote_queue):
        session_id = await _new_session(client)
        joined = await client.post(
            f"/api/rotation/sessions/{session_id}/queue", json={"name": "Leaver"}
        )

        await client.delete(
            f"/api/rotation/sessions/{session_id}/players/{joined.json()['player_id']}"
        )

        assert remote_queue.entries == {}

    async def test_remote_failure_does_not_block_join(self, client, monkeypatch):
        """A failed mirror call still queues the player, without a remote id."""
        monkeypatch.setattr(rotation_routes.settings, "enable_remote_queue", True)
        remote = MagicMock()
        remote.add_player = AsyncMock(return_value=RemoteQueueResult(error="connection refused"))
        app.state.remote_queue = remote
        session_id = await _new_session(client)

        response = await client.post(
            f"/api/rotation/sessions/{session_id}/queue", json={"name": "Offline"}
        )

        queued = response.json()["state"]["match"]["queue"][0]
        assert response.json()["applied"] is True
        assert "remote_id" not in queued
        remote.add_player.assert_awaited_once_with("Offline")
