"""Utility modules for gotnext."""

from gotnext.utils.team_refs import (
    TeamRef,
    bench_ref,
    court_ref,
    is_court_team_id,
    parse_team_ref,
)

__all__ = [
    "TeamRef",
    "bench_ref",
    "court_ref",
    "is_court_team_id",
    "parse_team_ref",
]
