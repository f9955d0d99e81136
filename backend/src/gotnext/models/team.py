"""Team and roster slot models."""

from dataclasses import dataclass, replace
from typing import Literal, Optional

from gotnext.models.player import Player

TEAM_SIZE = 5

BLUE = "#1E88E5"
RED = "#F44336"

CourtTeamId = Literal["team1", "team2"]
COURT_TEAM_IDS: tuple[str, str] = ("team1", "team2")

# Fixed identities for the two court teams
_COURT_IDENTITIES = {
    "team1": ("Team 1", BLUE),
    "team2": ("Team 2", RED),
}

Slot = Optional[Player]


def empty_slots(size: int = TEAM_SIZE) -> tuple[Slot, ...]:
    """Return a roster of ``size`` empty slots."""
    return (None,) * size


@dataclass(frozen=True)
class Team:
    """A team with a fixed identity and exactly TEAM_SIZE roster slots.

    Only ``slots`` ever changes between snapshots; ``id``, ``name`` and
    ``color`` are bound to the court position or bench position the team
    occupies.
    """

    id: str
    name: str
    color: str
    slots: tuple[Slot, ...] = empty_slots()

    def __post_init__(self):
        if len(self.slots) != TEAM_SIZE:
            raise ValueError(
                f"Team {self.id} must have exactly {TEAM_SIZE} slots, got {len(self.slots)}"
            )

    @property
    def players(self) -> list[Player]:
        """Seated players in slot order."""
        return [p for p in self.slots if p is not None]

    @property
    def occupied_count(self) -> int:
        return sum(1 for p in self.slots if p is not None)

    @property
    def is_full(self) -> bool:
        return self.occupied_count == TEAM_SIZE

    @property
    def is_empty(self) -> bool:
        return self.occupied_count == 0

    def first_empty_slot(self) -> int | None:
        """Lowest-index empty slot, or None when the team is full."""
        for index, player in enumerate(self.slots):
            if player is None:
                return index
        return None

    def slot_of(self, player_id: str) -> int | None:
        """Slot index holding ``player_id``, or None."""
        for index, player in enumerate(self.slots):
            if player is not None and player.id == player_id:
                return index
        return None

    def with_slots(self, slots) -> "Team":
        """Same identity, new roster."""
        return replace(self, slots=tuple(slots))

    def with_player(self, index: int, player: Slot) -> "Team":
        slots = list(self.slots)
        slots[index] = player
        return self.with_slots(slots)

    def without_player(self, player_id: str) -> "Team":
        """Vacate ``player_id``'s slot, leaving a hole in place."""
        return self.with_slots(
            None if p is not None and p.id == player_id else p for p in self.slots
        )

    def cleared(self) -> "Team":
        return self.with_slots(empty_slots())


def court_team(team_id: str, slots: tuple[Slot, ...] | None = None) -> Team:
    """Build a court team with its permanent name and color."""
    if team_id not in _COURT_IDENTITIES:
        raise ValueError(f"Unknown court team: {team_id!r}")
    name, color = _COURT_IDENTITIES[team_id]
    return Team(id=team_id, name=name, color=color, slots=slots or empty_slots())


def bench_team_id(index: int) -> str:
    return f"queue-team-{index}"


def bench_team(index: int, slots: tuple[Slot, ...] | None = None) -> Team:
    """Build the bench team at ``index``: "Team 3", "Team 4", ... with alternating colors."""
    if index < 0:
        raise ValueError(f"Bench index must be non-negative, got {index}")
    return Team(
        id=bench_team_id(index),
        name=f"Team {index + 3}",
        color=BLUE if index % 2 == 0 else RED,
        slots=slots or empty_slots(),
    )
