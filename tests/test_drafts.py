"""Slip draft persistence tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from betleague.betslip.drafts import DraftStore
from betleague.betslip.slip import BetSlip
from betleague.context import SessionContext
from betleague.db.database import init_db
from betleague.parlays.types import BettingOption, GameInfo

GAME = GameInfo(home_team="Chiefs", away_team="Ravens", start_time=datetime(2024, 9, 8, 17, 0, tzinfo=timezone.utc))
CONTEXT = SessionContext(user_id=4, league_id=2, week=3)


@pytest.fixture()
def store() -> DraftStore:
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)
    return DraftStore(sessionmaker(bind=engine, class_=Session, expire_on_commit=False))


def _option(option_id: int, american_odds: int, **overrides) -> BettingOption:
    fields = dict(
        id=option_id,
        game_id="g1",
        market_type="player_pass_yds",
        outcome_name="Over",
        outcome_point=249.5,
        player_name="P. Mahomes",
        bookmaker="DraftKings",
        american_odds=american_odds,
    )
    fields.update(overrides)
    return BettingOption(**fields)


def test_saved_slip_comes_back_with_stakes_and_parlay(store: DraftStore) -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -115), GAME)
    slip.update_stake(slip.entries[0].entry_id, 22.5)
    slip.add_parlay_leg(_option(2, 140, game_id="g2", market_type="h2h", outcome_name="Ravens", outcome_point=None, player_name=None), GAME)
    slip.add_parlay_leg(_option(3, -110, game_id="g3", market_type="totals", outcome_point=44.5, player_name=None), GAME)
    slip.set_parlay_stake(12)
    store.save(CONTEXT, slip)

    restored = store.load(CONTEXT, available_balance=100)

    assert restored is not None
    entry = restored.entries[0]
    assert entry.option == slip.entries[0].option
    assert entry.stake == 22.5
    assert entry.game_info == GAME
    assert [leg.id for leg in restored.parlay.legs] == [2, 3]
    assert restored.parlay.stake == 12
    assert restored.remaining_budget == slip.remaining_budget


def test_saving_twice_replaces_draft(store: DraftStore) -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -115), GAME)
    store.save(CONTEXT, slip)
    slip.clear()
    slip.add(_option(5, 120, outcome_name="Under"), GAME)
    store.save(CONTEXT, slip)

    restored = store.load(CONTEXT, available_balance=100)
    assert [entry.option.id for entry in restored.entries] == [5]


def test_restored_stakes_clamped_to_current_balance(store: DraftStore) -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -115), GAME)
    slip.update_stake(slip.entries[0].entry_id, 60)
    store.save(CONTEXT, slip)

    restored = store.load(CONTEXT, available_balance=40)
    assert restored.entries[0].stake == 40
    assert restored.remaining_budget == 0


def test_discard_and_missing_draft(store: DraftStore) -> None:
    assert store.load(CONTEXT, available_balance=100) is None
    slip = BetSlip(100)
    slip.add(_option(1, -115), GAME)
    store.save(CONTEXT, slip)
    assert store.discard(CONTEXT)
    assert not store.discard(CONTEXT)
    assert store.load(CONTEXT.for_week(4), available_balance=100) is None


def test_restored_parlay_stake_clamped_to_what_singles_leave(store: DraftStore) -> None:
    slip = BetSlip(100)
    slip.add(_option(1, -115), GAME)
    slip.update_stake(slip.entries[0].entry_id, 30)
    slip.add_parlay_leg(_option(2, 140, game_id="g2", market_type="h2h", outcome_name="Ravens", outcome_point=None, player_name=None), GAME)
    slip.add_parlay_leg(_option(3, -110, game_id="g3", market_type="totals", outcome_point=44.5, player_name=None), GAME)
    slip.set_parlay_stake(50)
    store.save(CONTEXT, slip)

    restored = store.load(CONTEXT, available_balance=45)
    assert restored.entries[0].stake == 30
    assert restored.parlay.stake == 15
    assert restored.remaining_budget == 0
