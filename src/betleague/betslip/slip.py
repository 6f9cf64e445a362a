"""In-memory bet slip and parlay ticket bound by the weekly budget."""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal

from betleague.config import get_settings
from betleague.formatting import format_american_odds, outcome_display_name
from betleague.parlays.engine import (
    calculate_parlay_from_options,
    can_place_parlay,
    can_preview_parlay,
    find_duplicate_leg,
)
from betleague.parlays.odds import is_better_odds, round_half_up
from betleague.parlays.types import BettingOption, GameInfo, ParlayCalculation

logger = logging.getLogger(__name__)


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


@dataclass(frozen=True)
class Notice:
    """User-facing outcome of a slip mutation."""

    accepted: bool
    message: str = ""


@dataclass
class BetSlipEntry:
    entry_id: str
    option: BettingOption
    game_info: GameInfo
    stake: float

    @property
    def potential_payout(self) -> float:
        return round_half_up(self.stake * self.option.decimal_odds)

    @property
    def potential_profit(self) -> float:
        return round_half_up(_dec(self.potential_payout) - _dec(self.stake))


@dataclass(frozen=True)
class SlipSummary:
    bet_count: int
    total_stake: float
    total_payout: float
    total_profit: float
    remaining_budget: float
    budget_used_pct: float


class ParlayTicket:
    """Ordered parlay legs plus the stake riding on them."""

    def __init__(self, max_legs: int | None = None) -> None:
        self.max_legs = max_legs or get_settings().max_parlay_legs
        self.stake = 0.0
        self._legs: list[BettingOption] = []
        self._games: dict[int, GameInfo] = {}

    @property
    def legs(self) -> tuple[BettingOption, ...]:
        return tuple(self._legs)

    def game_for(self, option_id: int) -> GameInfo | None:
        return self._games.get(option_id)

    def add_leg(self, option: BettingOption, game_info: GameInfo | None = None) -> Notice:
        if option.is_locked:
            return Notice(False, f"{outcome_display_name(option)} is locked; the game has started")
        duplicate = find_duplicate_leg(self._legs, option)
        if duplicate is not None:
            return Notice(
                False,
                f"Parlay already has a leg on {outcome_display_name(duplicate)} "
                f"({duplicate.bookmaker} {format_american_odds(duplicate.american_odds)})",
            )
        if len(self._legs) >= self.max_legs:
            return Notice(False, f"Parlay cannot have more than {self.max_legs} legs")
        self._legs.append(option)
        if game_info is not None:
            self._games[option.id] = game_info
        return Notice(True, f"Added {outcome_display_name(option)} to parlay")

    def remove_leg(self, option_id: int) -> Notice:
        for idx, leg in enumerate(self._legs):
            if leg.id == option_id:
                del self._legs[idx]
                self._games.pop(option_id, None)
                return Notice(True, f"Removed {outcome_display_name(leg)} from parlay")
        return Notice(False, f"No parlay leg for betting option {option_id}")

    def clear(self) -> None:
        self._legs.clear()
        self._games.clear()
        self.stake = 0.0

    def restore_leg(self, option: BettingOption, game_info: GameInfo | None = None) -> None:
        """Re-append a saved leg as-is, locked or not."""

        self._legs.append(option)
        if game_info is not None:
            self._games[option.id] = game_info

    def lock_started(self, now: datetime) -> int:
        locked = 0
        for idx, leg in enumerate(self._legs):
            game = self._games.get(leg.id)
            if not leg.is_locked and game is not None and game.start_time <= now:
                self._legs[idx] = replace(leg, is_locked=True)
                locked += 1
        return locked

    @property
    def has_locked_legs(self) -> bool:
        return any(leg.is_locked for leg in self._legs)

    @property
    def can_preview(self) -> bool:
        return can_preview_parlay(self._legs)

    @property
    def can_place(self) -> bool:
        return can_place_parlay(self._legs)

    @property
    def calculation(self) -> ParlayCalculation | None:
        if not self.can_preview:
            return None
        return calculate_parlay_from_options(self.stake, self._legs)


class BetSlip:
    """A user's unsubmitted single bets and parlay for one week.

    ``available_balance`` is what is left of the weekly budget after bets the
    backend already holds. Stakes on the slip and on the parlay ticket share
    that balance; every mutation keeps their sum within it.
    """

    def __init__(
        self,
        available_balance: float,
        *,
        default_stake: float | None = None,
        max_parlay_legs: int | None = None,
    ) -> None:
        settings = get_settings()
        self.available_balance = available_balance
        self.default_stake = settings.default_stake if default_stake is None else default_stake
        self.parlay = ParlayTicket(max_legs=max_parlay_legs)
        self._entries: list[BetSlipEntry] = []
        self._ids = itertools.count(1)

    @property
    def entries(self) -> tuple[BetSlipEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def total_stake(self) -> float:
        return round_half_up(sum((_dec(entry.stake) for entry in self._entries), Decimal(0)))

    @property
    def remaining_budget(self) -> float:
        committed = _dec(self.total_stake) + _dec(self.parlay.stake)
        return round_half_up(_dec(self.available_balance) - committed)

    @property
    def has_locked_entries(self) -> bool:
        return any(entry.option.is_locked for entry in self._entries)

    def get(self, entry_id: str) -> BetSlipEntry | None:
        for entry in self._entries:
            if entry.entry_id == entry_id:
                return entry
        return None

    def find_matching(self, option: BettingOption) -> BetSlipEntry | None:
        for entry in self._entries:
            if entry.option.id == option.id or entry.option.outcome_key == option.outcome_key:
                return entry
        return None

    def add(self, option: BettingOption, game_info: GameInfo) -> Notice:
        if option.is_locked:
            return Notice(False, f"{outcome_display_name(option)} is locked; the game has started")

        existing = self.find_matching(option)
        if existing is None:
            stake = max(min(self.remaining_budget, self.default_stake), 0.0)
            entry = BetSlipEntry(
                entry_id=f"entry-{next(self._ids)}",
                option=option,
                game_info=game_info,
                stake=stake,
            )
            self._entries.append(entry)
            logger.debug("Added %s to slip with stake %.2f", option.id, stake)
            return Notice(True, f"Added {outcome_display_name(option)} to bet slip")

        old = existing.option
        new_price = f"{option.bookmaker} odds ({format_american_odds(option.american_odds)})"
        old_price = f"{old.bookmaker} odds ({format_american_odds(old.american_odds)})"
        if not is_better_odds(option.american_odds, old.american_odds):
            return Notice(False, f"Cannot add bet: {new_price} are not better than existing {old_price}")

        headroom = round_half_up(_dec(self.remaining_budget) + _dec(existing.stake))
        existing.option = option
        existing.game_info = game_info
        existing.stake = max(min(existing.stake, headroom), 0.0)
        return Notice(True, f"Replaced with better odds: {new_price} beat {old_price}")

    def remove(self, entry_id: str) -> Notice:
        entry = self.get(entry_id)
        if entry is None:
            return Notice(False, f"No bet slip entry {entry_id}")
        self._entries.remove(entry)
        return Notice(True, f"Removed {outcome_display_name(entry.option)} from bet slip")

    def update_stake(self, entry_id: str, amount: float) -> Notice:
        entry = self.get(entry_id)
        if entry is None:
            return Notice(False, f"No bet slip entry {entry_id}")
        headroom = _dec(self.remaining_budget) + _dec(entry.stake)
        rejection = _stake_rejection(amount, headroom)
        if rejection is not None:
            return rejection
        entry.stake = amount
        return Notice(True)

    def clear(self) -> None:
        self._entries.clear()
        self.parlay.clear()

    def clear_entries(self) -> None:
        self._entries.clear()

    def restore_entry(self, option: BettingOption, game_info: GameInfo, stake: float) -> BetSlipEntry:
        """Re-append a saved selection, clamping its stake to what the budget allows.

        Unlike :meth:`add` this keeps locked options so the slip shows them and
        placement can refuse the slip as a whole.
        """

        clamped = max(min(stake, self.remaining_budget), 0.0)
        if clamped != stake:
            logger.warning("Restored stake on %s clamped from %.2f to %.2f", option.id, stake, clamped)
        entry = BetSlipEntry(
            entry_id=f"entry-{next(self._ids)}",
            option=option,
            game_info=game_info,
            stake=clamped,
        )
        self._entries.append(entry)
        return entry

    def lock_started(self, now: datetime | None = None) -> int:
        """Mark entries whose game has kicked off as locked; return how many changed."""

        now = now or datetime.now(timezone.utc)
        locked = 0
        for entry in self._entries:
            if not entry.option.is_locked and entry.game_info.start_time <= now:
                entry.option = replace(entry.option, is_locked=True)
                locked += 1
        return locked + self.parlay.lock_started(now)

    def add_parlay_leg(self, option: BettingOption, game_info: GameInfo | None = None) -> Notice:
        return self.parlay.add_leg(option, game_info)

    def remove_parlay_leg(self, option_id: int) -> Notice:
        return self.parlay.remove_leg(option_id)

    def set_parlay_stake(self, amount: float) -> Notice:
        headroom = _dec(self.remaining_budget) + _dec(self.parlay.stake)
        rejection = _stake_rejection(amount, headroom)
        if rejection is not None:
            return rejection
        self.parlay.stake = amount
        return Notice(True)

    @property
    def parlay_calculation(self) -> ParlayCalculation | None:
        return self.parlay.calculation

    def summary(self) -> SlipSummary:
        total_stake = self.total_stake
        total_payout = round_half_up(
            sum((_dec(entry.potential_payout) for entry in self._entries), Decimal(0))
        )
        budget = self.available_balance
        return SlipSummary(
            bet_count=len(self._entries),
            total_stake=total_stake,
            total_payout=total_payout,
            total_profit=round_half_up(_dec(total_payout) - _dec(total_stake)),
            remaining_budget=self.remaining_budget,
            budget_used_pct=round_half_up(total_stake / budget * 100, 1) if budget > 0 else 0.0,
        )


def _stake_rejection(amount: float, headroom: Decimal) -> Notice | None:
    if amount is None or math.isnan(amount) or amount < 0:
        return Notice(False, "Stake must be zero or more")
    if _dec(amount) > headroom:
        return Notice(False, f"Stake must be between $0.00 and ${headroom:.2f}")
    return None
