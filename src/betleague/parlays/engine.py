"""Parlay pricing, validation and leg breakdown."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from decimal import Decimal

from betleague.config import get_settings
from betleague.errors import (
    InvalidStakeError,
    LockedLegError,
    TooFewLegsError,
    TooManyLegsError,
)
from betleague.parlays.odds import american_to_decimal, round_half_up
from betleague.parlays.types import BettingOption, ParlayCalculation, ParlayLeg

settings = get_settings()

PREVIEW_MIN_LEGS = 1


def parlay_decimal_odds(american_odds: Iterable[int]) -> float:
    decimal = 1.0
    count = 0
    for odds in american_odds:
        decimal *= american_to_decimal(odds)
        count += 1
    if not count:
        raise TooFewLegsError("Parlay must have at least 1 leg")
    return decimal


def parlay_payout(stake: float, american_odds: Sequence[int]) -> float:
    return round_half_up(stake * parlay_decimal_odds(american_odds))


def parlay_profit(stake: float, american_odds: Sequence[int]) -> tuple[float, float, float]:
    """Return ``(decimal_odds, payout, profit)`` for a stake on the given prices.

    Decimal odds are kept at 4 places for display; payout and profit are
    rounded half-up to the cent. The payout is computed from the unrounded
    combined price.
    """

    _check_stake(stake)
    decimal_odds = parlay_decimal_odds(american_odds)
    payout = parlay_payout(stake, american_odds)
    profit = round_half_up(Decimal(str(payout)) - Decimal(str(stake)))
    return round_half_up(decimal_odds, 4), payout, profit


def validate_parlay_bets(
    options: Sequence[BettingOption],
    *,
    min_legs: int = PREVIEW_MIN_LEGS,
    max_legs: int | None = None,
) -> None:
    max_legs = max_legs or settings.max_parlay_legs
    if len(options) < min_legs:
        raise TooFewLegsError(f"Parlay must have at least {min_legs} leg{'s' if min_legs != 1 else ''}")
    if len(options) > max_legs:
        raise TooManyLegsError(f"Parlay cannot have more than {max_legs} legs")
    locked = [option.id for option in options if option.is_locked]
    if locked:
        raise LockedLegError(f"Cannot include locked betting options in parlay: {locked}")


def can_preview_parlay(options: Sequence[BettingOption]) -> bool:
    return _passes(options, PREVIEW_MIN_LEGS)


def can_place_parlay(options: Sequence[BettingOption]) -> bool:
    return _passes(options, settings.min_parlay_legs)


def find_duplicate_leg(
    legs: Iterable[BettingOption], candidate: BettingOption
) -> BettingOption | None:
    """Return the leg already covering the candidate's game, market and outcome."""

    for leg in legs:
        if leg.outcome_key == candidate.outcome_key:
            return leg
    return None


def calculate_parlay_from_options(stake: float, options: Sequence[BettingOption]) -> ParlayCalculation:
    """Price a parlay for a stake across the supplied legs, in order."""

    validate_parlay_bets(options)
    decimal_odds, payout, profit = parlay_profit(stake, [option.american_odds for option in options])
    legs = [
        ParlayLeg(
            leg_number=idx,
            betting_option_id=option.id,
            game_id=option.game_id,
            market_type=option.market_type,
            outcome_name=option.outcome_name,
            outcome_point=option.outcome_point,
            player_name=option.player_name,
            bookmaker=option.bookmaker,
            american_odds=option.american_odds,
            decimal_odds=option.decimal_odds,
        )
        for idx, option in enumerate(options, start=1)
    ]
    return ParlayCalculation(
        stake=stake,
        decimal_odds=decimal_odds,
        payout=payout,
        profit=profit,
        legs=legs,
    )


def _check_stake(stake: float) -> None:
    if math.isnan(stake) or stake < 0:
        raise InvalidStakeError(f"Stake must be a non-negative amount, got {stake}")


def _passes(options: Sequence[BettingOption], min_legs: int) -> bool:
    try:
        validate_parlay_bets(options, min_legs=min_legs)
    except (TooFewLegsError, TooManyLegsError, LockedLegError):
        return False
    return True
