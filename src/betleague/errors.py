"""Exception hierarchy for odds, parlay and backend failures."""

from __future__ import annotations


class BetLeagueError(Exception):
    """Base class for all betting league errors."""


class InvalidOddsError(BetLeagueError, ValueError):
    """Raised for American odds that cannot be priced (i.e. zero)."""


class InvalidStakeError(BetLeagueError, ValueError):
    """Raised when a stake is negative or not a number."""


class ParlayValidationError(BetLeagueError, ValueError):
    """Raised when a leg set cannot be combined into a parlay."""


class TooFewLegsError(ParlayValidationError):
    pass


class TooManyLegsError(ParlayValidationError):
    pass


class LockedLegError(ParlayValidationError):
    pass


class LeagueApiError(BetLeagueError):
    """Raised when the league backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        # No status means the request never got an answer (transport failure).
        return self.status_code is None or self.status_code >= 500
