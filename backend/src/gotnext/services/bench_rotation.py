"""Bench of upcoming teams.

Bench identities are bound to positions: position 0 is always
``queue-team-0`` / "Team 3". Rotating the bench moves rosters, never
identities.
"""

from typing import Sequence

from gotnext.models.team import Team, bench_team

DEFAULT_BENCH_DEPTH = 3


def empty_bench(depth: int = DEFAULT_BENCH_DEPTH) -> tuple[Team, ...]:
    """A bench of ``depth`` empty teams."""
    if depth < 1:
        raise ValueError(f"Bench depth must be at least 1, got {depth}")
    return tuple(bench_team(i) for i in range(depth))


def pad_bench(bench: Sequence[Team], depth: int = DEFAULT_BENCH_DEPTH) -> tuple[Team, ...]:
    """Restore a bench to exactly ``depth`` teams with positional identities.

    Extra teams beyond ``depth`` are dropped; missing positions are filled
    with empty teams.
    """
    padded = []
    for i in range(depth):
        if i < len(bench):
            padded.append(bench_team(i, bench[i].slots))
        else:
            padded.append(bench_team(i))
    return tuple(padded)


def shift_bench(bench: Sequence[Team]) -> tuple[Team, tuple[Team, ...]]:
    """Promote the front team and move everyone else up one position.

    Returns:
        (promoted, new_bench): ``promoted`` is the front team as it was
        before the shift; ``new_bench`` has each roster moved one position
        forward and an empty team at the back.
    """
    if not bench:
        raise ValueError("Cannot shift an empty bench")
    promoted = bench[0]
    rosters = [team.slots for team in bench[1:]]
    new_bench = tuple(
        bench_team(i, rosters[i]) if i < len(rosters) else bench_team(i)
        for i in range(len(bench))
    )
    return promoted, new_bench


def bench_is_empty(bench: Sequence[Team]) -> bool:
    """True when no bench team has a single player."""
    return all(team.is_empty for team in bench)
