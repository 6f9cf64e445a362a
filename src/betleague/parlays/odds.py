"""Odds conversion and best-price selection."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, TypeVar

from betleague.errors import InvalidOddsError

CENT = Decimal("0.01")


class Quote(Protocol):
    american_odds: int


QuoteT = TypeVar("QuoteT", bound=Quote)


def american_to_decimal(odds: int) -> float:
    """Convert American odds into decimal odds (always above 1.0)."""

    if odds == 0:
        raise InvalidOddsError("American odds of 0 are not a valid price")
    return 1 + (odds / 100) if odds > 0 else 1 + (100 / abs(odds))


def american_to_implied(odds: int) -> float:
    """Convert American odds into implied probability."""

    if odds == 0:
        raise InvalidOddsError("American odds of 0 are not a valid price")
    if odds > 0:
        return 100 / (odds + 100)
    return -odds / (-odds + 100)


def is_better_odds(new_odds: int, existing_odds: int) -> bool:
    return american_to_decimal(new_odds) > american_to_decimal(existing_odds)


def select_best_odds(quotes: Sequence[QuoteT]) -> QuoteT:
    """Return the quote paying the most for the bettor.

    Prices are compared on their decimal equivalent recomputed from the
    American odds; any stored decimal value on the quote is ignored. When two
    quotes price identically the one listed first wins.
    """

    if not quotes:
        raise ValueError("Cannot select best odds from an empty list of quotes")
    best = quotes[0]
    best_decimal = american_to_decimal(best.american_odds)
    for quote in quotes[1:]:
        decimal = american_to_decimal(quote.american_odds)
        if decimal > best_decimal:
            best, best_decimal = quote, decimal
    return best


def round_half_up(value: float | Decimal, places: int = 2) -> float:
    """Round like a cashier: halves go away from zero at the last place."""

    exponent = CENT if places == 2 else Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))
