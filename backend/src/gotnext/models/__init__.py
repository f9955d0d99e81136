"""Data models for the gotnext rotation."""

from gotnext.models.player import Player
from gotnext.models.team import (
    BLUE,
    COURT_TEAM_IDS,
    RED,
    TEAM_SIZE,
    Team,
    bench_team,
    bench_team_id,
    court_team,
    empty_slots,
)
from gotnext.models.match import COURT_CAPACITY, Match, MatchStatus, status_for_court_count
from gotnext.models.rotation import RotationState
from gotnext.models.session import RotationSession
from gotnext.models.remote_queue import RemoteQueueEntry, RemoteQueueResult

__all__ = [
    "Player",
    "BLUE",
    "COURT_TEAM_IDS",
    "RED",
    "TEAM_SIZE",
    "Team",
    "bench_team",
    "bench_team_id",
    "court_team",
    "empty_slots",
    "COURT_CAPACITY",
    "Match",
    "MatchStatus",
    "status_for_court_count",
    "RotationState",
    "RotationSession",
    "RemoteQueueEntry",
    "RemoteQueueResult",
]
