"""Normalize team references from callers into court/bench targets.

Callers address teams several ways: court ids (``team1``),
display names (``Team 4``), bench ids (``queue-team-1``) and raw bench
indices from slot taps. All of them resolve here.
"""

import re
from dataclasses import dataclass
from typing import Literal

from gotnext.models.team import COURT_TEAM_IDS

_COURT_NAME_ALIASES = {
    "team1": "team1",
    "team 1": "team1",
    "team-1": "team1",
    "team2": "team2",
    "team 2": "team2",
    "team-2": "team2",
}

_BENCH_ID_RE = re.compile(r"^(?:queue-team|bench)-(\d+)$")
_TEAM_NAME_RE = re.compile(r"^team[ -]?(\d+)$")


@dataclass(frozen=True)
class TeamRef:
    """A resolved placement target."""

    kind: Literal["court", "bench"]
    court_id: str | None = None
    bench_index: int | None = None

    @property
    def is_court(self) -> bool:
        return self.kind == "court"


def court_ref(team_id: str) -> TeamRef:
    return TeamRef(kind="court", court_id=team_id)


def bench_ref(index: int) -> TeamRef:
    return TeamRef(kind="bench", bench_index=index)


def _is_valid_ref(ref: TeamRef) -> bool:
    if ref.kind == "court":
        return ref.court_id in COURT_TEAM_IDS
    if ref.kind == "bench":
        index = ref.bench_index
        return isinstance(index, int) and not isinstance(index, bool) and index >= 0
    return False


def parse_team_ref(ref: str | int | TeamRef | None) -> TeamRef | None:
    """Resolve ``ref`` to a TeamRef, or None if it names no team.

    Bench indices are not range-checked here; the engine knows the
    bench depth.

    Examples:
        >>> parse_team_ref("Team 2").court_id
        'team2'
        >>> parse_team_ref("queue-team-1").bench_index
        1
        >>> parse_team_ref("Team 4").bench_index
        1
    """
    if ref is None:
        return None
    if isinstance(ref, TeamRef):
        return ref if _is_valid_ref(ref) else None
    if isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return bench_ref(ref) if ref >= 0 else None

    text = str(ref).strip().lower()
    if not text:
        return None

    if text in _COURT_NAME_ALIASES:
        return court_ref(_COURT_NAME_ALIASES[text])

    match = _BENCH_ID_RE.match(text)
    if match:
        return bench_ref(int(match.group(1)))

    # "Team 3" is the first bench team
    match = _TEAM_NAME_RE.match(text)
    if match:
        number = int(match.group(1))
        if number >= 3:
            return bench_ref(number - 3)
        return None

    if text.isdigit():
        return bench_ref(int(text))

    return None


def is_court_team_id(team_id: str) -> bool:
    return team_id in COURT_TEAM_IDS
