"""Persist an unsubmitted slip so it survives moving to the review screen."""

from __future__ import annotations

import logging
from datetime import timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from betleague.betslip.slip import BetSlip
from betleague.context import SessionContext
from betleague.db.database import get_session
from betleague.db.models import DraftSelection, SlipDraft
from betleague.parlays.types import BettingOption, GameInfo

logger = logging.getLogger(__name__)

SINGLE = "single"
PARLAY_LEG = "parlay_leg"


def _selection(kind: str, position: int, option: BettingOption, game: GameInfo | None, stake: float = 0.0) -> DraftSelection:
    return DraftSelection(
        kind=kind,
        position=position,
        stake=stake,
        betting_option_id=option.id,
        game_id=option.game_id,
        market_type=option.market_type,
        outcome_name=option.outcome_name,
        outcome_point=option.outcome_point,
        player_name=option.player_name,
        bookmaker=option.bookmaker,
        american_odds=option.american_odds,
        is_locked=option.is_locked,
        home_team=game.home_team if game else None,
        away_team=game.away_team if game else None,
        start_time=game.start_time.astimezone(timezone.utc) if game else None,
    )


def _option(row: DraftSelection) -> BettingOption:
    return BettingOption(
        id=row.betting_option_id,
        game_id=row.game_id,
        market_type=row.market_type,
        outcome_name=row.outcome_name,
        outcome_point=row.outcome_point,
        player_name=row.player_name,
        bookmaker=row.bookmaker,
        american_odds=row.american_odds,
        is_locked=row.is_locked,
    )


def _game(row: DraftSelection) -> GameInfo | None:
    if row.start_time is None:
        return None
    start = row.start_time
    if start.tzinfo is None:
        # SQLite hands datetimes back naive; they were stored as UTC.
        start = start.replace(tzinfo=timezone.utc)
    return GameInfo(home_team=row.home_team or "", away_team=row.away_team or "", start_time=start)


class DraftStore:
    """Save, load and discard one slip draft per user and week."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._factory = session_factory

    def save(self, context: SessionContext, slip: BetSlip) -> None:
        with get_session(self._factory) as session:
            self._delete(session, context)
            draft = SlipDraft(
                user_id=context.user_id,
                league_id=context.league_id,
                week=context.week,
                parlay_stake=slip.parlay.stake,
            )
            for position, entry in enumerate(slip.entries):
                draft.selections.append(_selection(SINGLE, position, entry.option, entry.game_info, entry.stake))
            for position, leg in enumerate(slip.parlay.legs):
                draft.selections.append(_selection(PARLAY_LEG, position, leg, slip.parlay.game_for(leg.id)))
            session.add(draft)
        logger.debug(
            "Saved slip draft for user %s week %s (%d bets, %d parlay legs)",
            context.user_id,
            context.week,
            len(slip),
            len(slip.parlay.legs),
        )

    def load(self, context: SessionContext, available_balance: float) -> BetSlip | None:
        """Rebuild the saved slip against today's balance, or ``None`` if nothing is saved."""

        with get_session(self._factory) as session:
            draft = session.scalars(self._query(context)).first()
            if draft is None:
                return None
            slip = BetSlip(available_balance)
            for row in draft.selections:
                option, game = _option(row), _game(row)
                if row.kind == SINGLE:
                    if game is None:
                        logger.warning("Dropping saved bet %s without game details", row.betting_option_id)
                        continue
                    slip.restore_entry(option, game, row.stake)
                else:
                    slip.parlay.restore_leg(option, game)
            if draft.parlay_stake and not slip.set_parlay_stake(draft.parlay_stake).accepted:
                slip.set_parlay_stake(max(slip.remaining_budget, 0.0))
        return slip

    def discard(self, context: SessionContext) -> bool:
        with get_session(self._factory) as session:
            return self._delete(session, context) > 0

    @staticmethod
    def _query(context: SessionContext):
        return select(SlipDraft).where(SlipDraft.user_id == context.user_id, SlipDraft.week == context.week)

    @staticmethod
    def _delete(session: Session, context: SessionContext) -> int:
        drafts = session.scalars(DraftStore._query(context)).all()
        for draft in drafts:
            session.delete(draft)
        session.flush()
        return len(drafts)
