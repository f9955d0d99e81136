"""Random court seeding.

When enough players are available, the two court rosters are rebuilt from
scratch by shuffling the whole pool. The shuffle discards any
prior order; callers pass a seeded ``random.Random`` when they need a
reproducible split.
"""

import random
from typing import Sequence

from gotnext.models.player import Player
from gotnext.models.team import Slot, TEAM_SIZE


def _pad(players: Sequence[Player], size: int) -> tuple[Slot, ...]:
    return tuple(players) + (None,) * (size - len(players))


def seed_court(
    pool: Sequence[Player],
    rng: random.Random,
    team_size: int = TEAM_SIZE,
) -> tuple[tuple[Slot, ...], tuple[Slot, ...], tuple[Player, ...]]:
    """Split ``pool`` into two shuffled court rosters and a remainder.

    Args:
        pool: Players eligible for the court (never bench players)
        rng: Random source used for the shuffle
        team_size: Roster slots per team

    Returns:
        (team1_slots, team2_slots, remainder) where each roster is padded
        with empty slots to ``team_size`` and the remainder keeps the
        shuffled order.
    """
    shuffled = list(pool)
    rng.shuffle(shuffled)
    team1 = shuffled[:team_size]
    team2 = shuffled[team_size:2 * team_size]
    remainder = tuple(shuffled[2 * team_size:])
    return _pad(team1, team_size), _pad(team2, team_size), remainder


def can_seed_court(pool_size: int, team_size: int = TEAM_SIZE) -> bool:
    """True when the pool can fill both court teams."""
    return pool_size >= 2 * team_size
