"""Rotation engine: the "next up" state machine.

Every public operation takes a RotationState and returns a RotationState.
Operations never raise for an unmet precondition; they hand back the very
same object they were given, so ``new is old`` means "not applied".
"""

import itertools
import logging
import random
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from gotnext.models.match import Match, MatchStatus, status_for_court_count
from gotnext.models.player import Player
from gotnext.models.rotation import RotationState
from gotnext.models.team import COURT_TEAM_IDS, TEAM_SIZE, Team, court_team
from gotnext.services.bench_rotation import (
    DEFAULT_BENCH_DEPTH,
    bench_is_empty,
    empty_bench,
    pad_bench,
    shift_bench,
)
from gotnext.services.team_assignment import can_seed_court, seed_court
from gotnext.utils.team_refs import TeamRef, parse_team_ref

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _rejected(state: RotationState, operation: str, reason: str) -> RotationState:
    logger.debug(f"{operation} not applied: {reason}")
    return state


class RotationEngine:
    """Applies rotation rules to immutable session snapshots."""

    def __init__(
        self,
        bench_depth: int = DEFAULT_BENCH_DEPTH,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the engine.

        Args:
            bench_depth: Number of upcoming teams kept on the bench
            rng: Random source for court seeding (seed it for reproducible splits)
            clock: Returns the current time; defaults to UTC now
        """
        if bench_depth < 1:
            raise ValueError(f"Bench depth must be at least 1, got {bench_depth}")
        self.bench_depth = bench_depth
        self.rng = rng or random.Random()
        self.clock = clock or _utcnow
        self._player_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def create_session(self) -> RotationState:
        """Fresh session: empty court in ``waiting``, empty queue, empty bench."""
        match = Match(
            id=f"game_{uuid.uuid4().hex[:12]}",
            status=MatchStatus.WAITING,
            team1=court_team("team1"),
            team2=court_team("team2"),
            queue=(),
            created_at=self.clock(),
        )
        return RotationState(match=match, bench=empty_bench(self.bench_depth))

    def new_player(self, name: str, remote_id: int | None = None) -> Player:
        """Mint a player with a session-unique id and the current join time.

        Raises:
            ValueError: If ``name`` is blank
        """
        return Player(
            id=f"player_{next(self._player_ids)}",
            name=name,
            joined_at=self.clock(),
            remote_id=remote_id,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def place_player(
        self,
        state: RotationState,
        target: str | int | TeamRef,
        player: Player,
        position: int | None = None,
    ) -> RotationState:
        """Seat ``player`` on a court team or bench team.

        An occupied or out-of-range ``position`` falls back to the lowest
        empty slot of the same team. Court placement recomputes the match
        status; bench placement never touches it.
        """
        op = "place_player"
        ref = parse_team_ref(target)
        if ref is None:
            return _rejected(state, op, f"unknown team {target!r}")
        if state.contains(player.id):
            return _rejected(state, op, f"player {player.id} is already in the rotation")

        if ref.is_court:
            if state.status == MatchStatus.IN_PROGRESS:
                return _rejected(state, op, "court rosters are locked while a game is in progress")
            team = state.match.team(ref.court_id)
        else:
            if not 0 <= ref.bench_index < len(state.bench):
                return _rejected(state, op, f"no bench team at index {ref.bench_index}")
            team = state.bench[ref.bench_index]

        index = self._resolve_slot(team, position)
        if index is None:
            return _rejected(state, op, f"{team.name} is full")
        placed = team.with_player(index, player)

        if not ref.is_court:
            bench = list(state.bench)
            bench[ref.bench_index] = placed
            return replace(state, bench=tuple(bench))

        match = self._with_court_team(state.match, placed)
        match = replace(match, status=status_for_court_count(match.court_count))
        return replace(state, match=match)

    def join_queue(self, state: RotationState, player: Player) -> RotationState:
        """Add ``player`` to the unassigned pool.

        While no game is running and the court is short, reaching ten
        available players seeds both court teams at random.
        """
        op = "join_queue"
        if state.contains(player.id):
            return _rejected(state, op, f"player {player.id} is already in the rotation")

        match = state.match
        queue = match.queue + (player,)
        court_count = match.court_count

        if (
            match.status == MatchStatus.IN_PROGRESS
            or court_count >= 2 * TEAM_SIZE
            or not can_seed_court(court_count + len(queue))
        ):
            return replace(state, match=replace(match, queue=queue))

        pool = match.court_players + list(queue)
        return replace(state, match=self._reseeded(match, pool))

    def remove_player(self, state: RotationState, player_id: str) -> RotationState:
        """Remove ``player_id`` from court, bench or queue.

        Vacated slots stay empty in place. If the court was ready or in play,
        the remaining court and queue players are reshuffled onto the court
        when at least ten remain; otherwise the match drops to ``waiting``.
        """
        op = "remove_player"
        if not state.contains(player_id):
            return _rejected(state, op, f"player {player_id} is not in the rotation")

        bench = tuple(team.without_player(player_id) for team in state.bench)
        prev = state.match
        match = replace(
            prev,
            team1=prev.team1.without_player(player_id),
            team2=prev.team2.without_player(player_id),
            queue=tuple(p for p in prev.queue if p.id != player_id),
        )

        if prev.status in (MatchStatus.READY, MatchStatus.IN_PROGRESS):
            pool = match.court_players + list(match.queue)
            if can_seed_court(len(pool)):
                match = self._reseeded(match, pool)
            else:
                match = replace(match, status=MatchStatus.WAITING, started_at=None)

        return RotationState(match=match, bench=bench)

    def start_match(self, state: RotationState) -> RotationState:
        """Tip off. Allowed from ``waiting`` or ``ready``, whatever the head count."""
        if state.status not in (MatchStatus.WAITING, MatchStatus.READY):
            return _rejected(state, "start_match", f"cannot start from {state.status.value}")
        match = replace(
            state.match,
            status=MatchStatus.IN_PROGRESS,
            started_at=self.clock(),
            winner=None,
        )
        return replace(state, match=match)

    def end_match(self, state: RotationState, winner: str) -> RotationState:
        """Record the winner and bring the next bench team onto the court.

        Winners stay under their own court identity; the front bench roster
        takes over the losing identity and the bench moves up one position.
        With nothing on the bench, the losing side is cleared and the winner
        is kept on the match as the result.
        """
        op = "end_match"
        if state.status != MatchStatus.IN_PROGRESS:
            return _rejected(state, op, f"no game in progress ({state.status.value})")
        if winner not in COURT_TEAM_IDS:
            return _rejected(state, op, f"unknown winner {winner!r}")

        loser_id = "team2" if winner == "team1" else "team1"
        match = state.match
        bench = pad_bench(state.bench, self.bench_depth)

        if bench_is_empty(bench):
            loser = match.team(loser_id).cleared()
            match = replace(
                self._with_court_team(match, loser),
                status=MatchStatus.WAITING,
                started_at=None,
                winner=winner,
            )
            return RotationState(match=match, bench=bench)

        promoted, bench = shift_bench(bench)
        challengers = match.team(loser_id).with_slots(promoted.slots)
        match = self._with_court_team(match, challengers)
        match = replace(
            match,
            status=status_for_court_count(match.court_count),
            started_at=None,
            winner=None,
        )
        return RotationState(match=match, bench=bench)

    def substitute_player(
        self,
        state: RotationState,
        from_player_id: str,
        to_player: Player,
    ) -> RotationState:
        """Swap a court player for ``to_player`` in the same slot."""
        op = "substitute_player"
        if state.contains(to_player.id):
            return _rejected(state, op, f"player {to_player.id} is already in the rotation")

        match = state.match
        for team in (match.team1, match.team2):
            index = team.slot_of(from_player_id)
            if index is not None:
                match = self._with_court_team(match, team.with_player(index, to_player))
                return replace(state, match=match)

        return _rejected(state, op, f"player {from_player_id} is not on the court")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_slot(team: Team, position: int | None) -> int | None:
        if position is not None and 0 <= position < TEAM_SIZE and team.slots[position] is None:
            return position
        return team.first_empty_slot()

    @staticmethod
    def _with_court_team(match: Match, team: Team) -> Match:
        if team.id == "team1":
            return replace(match, team1=team)
        return replace(match, team2=team)

    def _reseeded(self, match: Match, pool: list[Player]) -> Match:
        team1_slots, team2_slots, remainder = seed_court(pool, self.rng)
        return replace(
            match,
            team1=match.team1.with_slots(team1_slots),
            team2=match.team2.with_slots(team2_slots),
            queue=remainder,
            status=MatchStatus.READY,
            started_at=None,
        )
