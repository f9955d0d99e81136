"""Match (current on-court game) model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from gotnext.models.player import Player
from gotnext.models.team import CourtTeamId, Team, TEAM_SIZE


class MatchStatus(str, Enum):
    """Lifecycle of the game on court."""

    WAITING = "waiting"  # Fewer than 10 players on court
    READY = "ready"  # Both court teams full, not started
    IN_PROGRESS = "in-progress"  # Started, waiting for a winner
    COMPLETED = "completed"  # Wire value kept for clients; no transition produces it


COURT_CAPACITY = 2 * TEAM_SIZE


@dataclass(frozen=True)
class Match:
    """The single current game: two fixed-identity court teams plus the queue."""

    id: str
    status: MatchStatus
    team1: Team
    team2: Team
    queue: tuple[Player, ...]
    created_at: datetime
    started_at: datetime | None = None
    winner: CourtTeamId | None = None

    @property
    def court_count(self) -> int:
        """Occupied court slots across both teams."""
        return self.team1.occupied_count + self.team2.occupied_count

    @property
    def court_players(self) -> list[Player]:
        return self.team1.players + self.team2.players

    def team(self, team_id: str) -> Team:
        if team_id == "team1":
            return self.team1
        if team_id == "team2":
            return self.team2
        raise KeyError(team_id)


def status_for_court_count(count: int) -> MatchStatus:
    """Status of a not-started match with ``count`` players on court."""
    return MatchStatus.READY if count == COURT_CAPACITY else MatchStatus.WAITING
