"""Explicit session context handed to services instead of process globals."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SessionContext:
    """Who is betting, in which league, for which week and matchup."""

    user_id: int
    league_id: int
    week: int
    matchup_id: int | None = None
    username: str | None = None

    def for_week(self, week: int) -> "SessionContext":
        # The matchup is per week, so it has to be looked up again.
        return replace(self, week=week, matchup_id=None)

    def with_matchup(self, matchup_id: int) -> "SessionContext":
        return replace(self, matchup_id=matchup_id)
