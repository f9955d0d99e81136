"""Rotation snapshot: the match plus the bench of upcoming teams."""

from dataclasses import dataclass
from typing import Iterator

from gotnext.models.match import Match, MatchStatus
from gotnext.models.player import Player
from gotnext.models.team import Team


@dataclass(frozen=True)
class RotationState:
    """Complete rotation state at a point in time.

    Every engine operation takes one of these and returns a new one
    (or the same object, when the operation did not apply).
    """

    match: Match
    bench: tuple[Team, ...]

    @property
    def status(self) -> MatchStatus:
        return self.match.status

    def teams(self) -> Iterator[Team]:
        """Court teams first, then the bench in order."""
        yield self.match.team1
        yield self.match.team2
        yield from self.bench

    def iter_players(self) -> Iterator[Player]:
        """Every player in the session: court, bench, then queue."""
        for team in self.teams():
            yield from team.players
        yield from self.match.queue

    def contains(self, player_id: str) -> bool:
        return any(p.id == player_id for p in self.iter_players())

    def find_player(self, player_id: str) -> Player | None:
        for player in self.iter_players():
            if player.id == player_id:
                return player
        return None

    def locate(self, player_id: str) -> tuple[str, int] | None:
        """Where ``player_id`` sits: (team id, slot index) or ("queue", position)."""
        for team in self.teams():
            index = team.slot_of(player_id)
            if index is not None:
                return team.id, index
        for position, player in enumerate(self.match.queue):
            if player.id == player_id:
                return "queue", position
        return None

    @property
    def bench_player_count(self) -> int:
        return sum(team.occupied_count for team in self.bench)
