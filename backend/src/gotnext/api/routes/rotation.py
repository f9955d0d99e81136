"""REST endpoints for hosted rotation sessions."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from gotnext.config import settings
from gotnext.models.player import Player
from gotnext.models.rotation import RotationState
from gotnext.models.session import RotationSession
from gotnext.models.team import Team
from gotnext.services.remote_queue_client import get_remote_queue_client
from gotnext.services.session_manager import RotationSessionManager, SessionNotFoundError
from gotnext.utils.team_refs import bench_ref, court_ref

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rotation", tags=["rotation"])


class AddPlayerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=40)
    position: Optional[int] = None


class JoinQueueRequest(BaseModel):
    name: str = Field(min_length=1, max_length=40)


class SubstituteRequest(BaseModel):
    name: str = Field(min_length=1, max_length=40)


class EndMatchRequest(BaseModel):
    winner: Literal["team1", "team2"]


def _get_session_manager(request: Request) -> RotationSessionManager:
    """Get or create the session manager from app state."""
    if not hasattr(request.app.state, "session_manager"):
        request.app.state.session_manager = RotationSessionManager(settings)
    return request.app.state.session_manager


def _get_remote_queue(request: Request):
    """Remote queue mirror, or None when mirroring is disabled."""
    if not settings.enable_remote_queue:
        return None
    if not hasattr(request.app.state, "remote_queue"):
        request.app.state.remote_queue = get_remote_queue_client(
            settings.remote_queue_url, timeout=settings.remote_queue_timeout
        )
    return request.app.state.remote_queue


def _get_session(manager: RotationSessionManager, session_id: str) -> RotationSession:
    try:
        return manager.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


def _apply(request: Request, session_id: str, operation) -> dict:
    manager = _get_session_manager(request)
    try:
        session, applied = manager.apply(session_id, operation)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    return {
        "session_id": session.session_id,
        "applied": applied,
        "state": _serialize_state(session.state),
    }


def _new_player(session: RotationSession, name: str, remote_id: int | None = None) -> Player:
    try:
        return session.engine.new_player(name, remote_id=remote_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/sessions", status_code=201)
async def create_session(request: Request):
    """Open a new court with an empty rotation."""
    manager = _get_session_manager(request)
    session = manager.create_session()
    return {
        "session_id": session.session_id,
        "state": _serialize_state(session.state),
    }


@router.get("/sessions")
async def list_sessions(request: Request):
    """List active sessions."""
    return {"sessions": _get_session_manager(request).list_sessions()}


@router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    """Get the current rotation snapshot."""
    session = _get_session(_get_session_manager(request), session_id)
    return {
        "session_id": session.session_id,
        "state": _serialize_state(session.state),
    }


@router.delete("/sessions/{session_id}")
async def end_session(request: Request, session_id: str):
    """Close a session. Closing an unknown session succeeds silently."""
    _get_session_manager(request).remove_session(session_id)
    return {"status": "ended"}


@router.post("/sessions/{session_id}/court/{team_id}/players")
async def add_court_player(
    request: Request, session_id: str, team_id: Literal["team1", "team2"], body: AddPlayerRequest
):
    """Seat a new player on Team 1 or Team 2."""
    session = _get_session(_get_session_manager(request), session_id)
    player = _new_player(session, body.name)
    return _apply(
        request,
        session_id,
        lambda engine, state: engine.place_player(state, court_ref(team_id), player, body.position),
    )


@router.post("/sessions/{session_id}/bench/{index}/players")
async def add_bench_player(request: Request, session_id: str, index: int, body: AddPlayerRequest):
    """Seat a new player on an upcoming team."""
    session = _get_session(_get_session_manager(request), session_id)
    if index < 0:
        raise HTTPException(status_code=400, detail="Bench index must be non-negative")
    player = _new_player(session, body.name)
    return _apply(
        request,
        session_id,
        lambda engine, state: engine.place_player(state, bench_ref(index), player, body.position),
    )


@router.post("/sessions/{session_id}/queue")
async def join_queue(request: Request, session_id: str, body: JoinQueueRequest):
    """Add a player to the unassigned pool, mirroring to the remote queue if enabled."""
    session = _get_session(_get_session_manager(request), session_id)

    remote_id = None
    remote = _get_remote_queue(request)
    if remote is not None:
        result = await remote.add_player(body.name)
        if result.ok:
            remote_id = result.data.id
        else:
            logger.warning(f"Remote queue mirror failed for session {session_id}: {result.error}")

    player = _new_player(session, body.name, remote_id=remote_id)
    response = _apply(request, session_id, lambda engine, state: engine.join_queue(state, player))
    response["player_id"] = player.id
    return response


@router.delete("/sessions/{session_id}/players/{player_id}")
async def remove_player(request: Request, session_id: str, player_id: str):
    """Remove a player from wherever they are in the rotation."""
    session = _get_session(_get_session_manager(request), session_id)
    player = session.state.find_player(player_id)

    response = _apply(request, session_id, lambda engine, state: engine.remove_player(state, player_id))

    remote = _get_remote_queue(request)
    if response["applied"] and remote is not None and player and player.remote_id is not None:
        result = await remote.delete_player(player.remote_id)
        if not result.ok:
            logger.warning(f"Remote queue delete failed for {player_id}: {result.error}")
    return response


@router.post("/sessions/{session_id}/players/{player_id}/substitute")
async def substitute_player(request: Request, session_id: str, player_id: str, body: SubstituteRequest):
    """Replace a court player with a newcomer in the same slot."""
    session = _get_session(_get_session_manager(request), session_id)
    player = _new_player(session, body.name)
    return _apply(
        request,
        session_id,
        lambda engine, state: engine.substitute_player(state, player_id, player),
    )


@router.post("/sessions/{session_id}/match/start")
async def start_match(request: Request, session_id: str):
    """Start the game on court."""
    return _apply(request, session_id, lambda engine, state: engine.start_match(state))


@router.post("/sessions/{session_id}/match/end")
async def end_match(request: Request, session_id: str, body: EndMatchRequest):
    """Record the winner and rotate the next team in."""
    return _apply(request, session_id, lambda engine, state: engine.end_match(state, body.winner))


# Helper functions

def _serialize_player(player: Player | None) -> dict | None:
    """Serialize Player to dict (None for an empty slot)."""
    if player is None:
        return None
    data = {
        "id": player.id,
        "name": player.name,
        "joined_at": player.joined_at.isoformat(),
    }
    if player.remote_id is not None:
        data["remote_id"] = player.remote_id
    return data


def _serialize_team(team: Team) -> dict:
    """Serialize Team to dict."""
    return {
        "id": team.id,
        "name": team.name,
        "color": team.color,
        "players": [_serialize_player(p) for p in team.slots],
        "player_count": team.occupied_count,
    }


def _serialize_state(state: RotationState) -> dict:
    """Serialize RotationState to dict."""
    match = state.match
    return {
        "match": {
            "id": match.id,
            "status": match.status.value,
            "team1": _serialize_team(match.team1),
            "team2": _serialize_team(match.team2),
            "queue": [_serialize_player(p) for p in match.queue],
            "created_at": match.created_at.isoformat(),
            "started_at": match.started_at.isoformat() if match.started_at else None,
            "winner": match.winner,
            "court_count": match.court_count,
        },
        "bench": [_serialize_team(team) for team in state.bench],
    }
