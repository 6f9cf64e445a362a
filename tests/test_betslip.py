"""Bet slip and parlay ticket tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from betleague.betslip.slip import BetSlip
from betleague.parlays.types import BettingOption, GameInfo

KICKOFF = datetime(2024, 9, 8, 17, 0, tzinfo=timezone.utc)
GAME = GameInfo(home_team="Chiefs", away_team="Ravens", start_time=KICKOFF)


def _option(option_id: int, american_odds: int, *, bookmaker: str = "BookA", game_id: str = "g1", outcome: str = "Chiefs", market: str = "h2h", locked: bool = False) -> BettingOption:
    return BettingOption(
        id=option_id,
        game_id=game_id,
        market_type=market,
        outcome_name=outcome,
        bookmaker=bookmaker,
        american_odds=american_odds,
        is_locked=locked,
    )


def test_add_uses_default_stake_capped_by_budget() -> None:
    slip = BetSlip(100)
    assert slip.add(_option(1, -110), GAME).accepted
    assert slip.entries[0].stake == 10
    small = BetSlip(4.5)
    small.add(_option(1, -110), GAME)
    assert small.entries[0].stake == 4.5
    assert small.remaining_budget == 0


def test_better_odds_replace_entry_and_keep_stake() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    entry_id = slip.entries[0].entry_id
    assert slip.update_stake(entry_id, 25).accepted

    notice = slip.add(_option(1, 105, bookmaker="BookB"), GAME)

    assert notice.accepted
    assert "BookB" in notice.message and "+105" in notice.message
    assert len(slip) == 1
    entry = slip.entries[0]
    assert entry.entry_id == entry_id
    assert entry.option.american_odds == 105
    assert entry.stake == 25


def test_same_outcome_from_other_book_counts_as_existing() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    assert slip.add(_option(2, -105, bookmaker="BookB"), GAME).accepted
    assert [entry.option.id for entry in slip.entries] == [2]


@pytest.mark.parametrize("american_odds", [-110, -120])
def test_equal_or_worse_odds_rejected(american_odds: int) -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    before = slip.entries[0]

    notice = slip.add(_option(1, american_odds, bookmaker="BookB"), GAME)

    assert not notice.accepted
    assert "Cannot add bet" in notice.message
    assert slip.entries[0] is before
    assert before.option.bookmaker == "BookA"


def test_update_stake_respects_headroom() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    slip.add(_option(2, 150, outcome="Ravens"), GAME)
    first, second = slip.entries
    assert slip.update_stake(first.entry_id, 30).accepted
    assert slip.update_stake(second.entry_id, 40).accepted

    assert slip.update_stake(first.entry_id, 60).accepted
    assert first.stake == 60
    assert not slip.update_stake(first.entry_id, 61).accepted
    assert first.stake == 60
    assert slip.remaining_budget == 0


def test_update_stake_rejects_negative_and_nan() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    entry_id = slip.entries[0].entry_id
    assert not slip.update_stake(entry_id, -1).accepted
    assert not slip.update_stake(entry_id, float("nan")).accepted
    assert slip.entries[0].stake == 10


def test_remove_keeps_other_entry_ids_stable() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    slip.add(_option(2, 120, outcome="Ravens"), GAME)
    slip.add(_option(3, -105, game_id="g2", outcome="Over", market="totals"), GAME)
    first, second, third = (entry.entry_id for entry in slip.entries)

    assert slip.remove(first).accepted
    assert not slip.remove(first).accepted
    assert slip.update_stake(third, 15).accepted
    assert [entry.entry_id for entry in slip.entries] == [second, third]
    assert slip.get(third).stake == 15


def test_locked_option_rejected_from_slip() -> None:
    slip = BetSlip(100)
    assert not slip.add(_option(1, -110, locked=True), GAME).accepted
    assert len(slip) == 0


def test_parlay_duplicate_leg_rejected_without_change() -> None:
    slip = BetSlip(100)
    assert slip.add_parlay_leg(_option(1, 150), GAME).accepted
    assert slip.add_parlay_leg(_option(2, -110, game_id="g2"), GAME).accepted

    notice = slip.add_parlay_leg(_option(3, 170, bookmaker="BookB"), GAME)

    assert not notice.accepted
    assert [leg.id for leg in slip.parlay.legs] == [1, 2]


def test_parlay_leg_limit_and_locks() -> None:
    slip = BetSlip(100)
    for idx in range(10):
        assert slip.add_parlay_leg(_option(idx, -110, game_id=f"g{idx}")).accepted
    assert not slip.add_parlay_leg(_option(10, -110, game_id="g10")).accepted
    assert len(slip.parlay.legs) == 10
    slip.parlay.clear()
    assert not slip.add_parlay_leg(_option(1, -110, locked=True)).accepted


def test_parlay_calculation_tracks_legs_and_stake() -> None:
    slip = BetSlip(100)
    assert slip.parlay_calculation is None
    slip.add_parlay_leg(_option(1, 150), GAME)
    assert slip.parlay_calculation.leg_count == 1
    assert not slip.parlay.can_place
    slip.add_parlay_leg(_option(2, -110, game_id="g2"), GAME)
    assert slip.set_parlay_stake(10).accepted
    calc = slip.parlay_calculation
    assert (calc.decimal_odds, calc.payout, calc.profit) == (4.7727, 47.73, 37.73)
    slip.remove_parlay_leg(2)
    assert slip.parlay_calculation.leg_count == 1


def test_parlay_stake_shares_budget_with_singles() -> None:
    slip = BetSlip(50)
    slip.add(_option(1, -110), GAME)
    entry_id = slip.entries[0].entry_id
    slip.update_stake(entry_id, 30)
    slip.add_parlay_leg(_option(2, 150, game_id="g2"), GAME)
    assert not slip.set_parlay_stake(21).accepted
    assert slip.set_parlay_stake(20).accepted
    assert slip.remaining_budget == 0
    assert not slip.update_stake(entry_id, 31).accepted
    # freshly added bets get whatever is left, here nothing
    slip.add(_option(3, 120, game_id="g3"), GAME)
    assert slip.entries[-1].stake == 0


def test_summary_totals() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, 100), GAME)
    slip.add(_option(2, -200, outcome="Ravens"), GAME)
    summary = slip.summary()
    assert summary.bet_count == 2
    assert summary.total_stake == 20
    assert summary.total_payout == 35.0
    assert summary.total_profit == 15.0
    assert summary.remaining_budget == 80
    assert summary.budget_used_pct == 20.0


def test_lock_started_marks_entries_and_legs() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    slip.add_parlay_leg(_option(2, 150, game_id="g2"), GAME)
    assert slip.lock_started(KICKOFF - timedelta(minutes=1)) == 0
    assert slip.lock_started(KICKOFF + timedelta(minutes=1)) == 2
    assert slip.has_locked_entries
    assert slip.parlay.has_locked_legs
    assert slip.parlay_calculation is None


def test_clear_empties_slip_and_parlay() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    slip.add_parlay_leg(_option(2, 150, game_id="g2"), GAME)
    slip.set_parlay_stake(5)
    slip.clear()
    assert len(slip) == 0
    assert slip.parlay.legs == ()
    assert slip.remaining_budget == 100


def test_stake_above_headroom_leaves_budget_untouched() -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -110), GAME)
    slip.add(_option(2, 150, outcome="Ravens"), GAME)
    first, second = slip.entries
    slip.update_stake(first.entry_id, 30)
    slip.update_stake(second.entry_id, 40)

    notice = slip.update_stake(first.entry_id, 61)
    assert not notice.accepted
    assert notice.message == "Stake must be between $0.00 and $60.00"
    assert not slip.update_stake(first.entry_id, 500).accepted
    assert first.stake == 30
    assert slip.remaining_budget == 30


def test_rejected_parlay_stake_is_not_applied() -> None:
    slip = BetSlip(100)
    slip.add_parlay_leg(_option(1, 150), GAME)
    slip.add_parlay_leg(_option(2, -110, game_id="g2"), GAME)
    for amount in (-5, float("nan"), 100.01):
        assert not slip.set_parlay_stake(amount).accepted
    assert slip.parlay.stake == 0
    assert slip.remaining_budget == 100
