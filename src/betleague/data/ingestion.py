"""Turn validated backend payloads into domain betting options."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List

from betleague.data.schemas import (
    BettingOptionSchema,
    GameOptionsSchema,
    GameSchema,
    WeeklyOptionsResponse,
)
from betleague.parlays.odds import select_best_odds
from betleague.parlays.types import BettingOption, GameInfo

logger = logging.getLogger(__name__)


@dataclass
class OutcomeQuotes:
    """Every bookmaker's price for one outcome of one market on one game."""

    game_id: str
    game: GameInfo
    market_type: str
    outcome_name: str
    outcome_point: float | None
    quotes: List[BettingOption] = field(default_factory=list)

    @property
    def best(self) -> BettingOption:
        return select_best_odds(self.quotes)


def game_info_from_schema(game: GameSchema) -> GameInfo:
    start = game.start_time
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return GameInfo(home_team=game.home_team, away_team=game.away_team, start_time=start)


def option_from_schema(option: BettingOptionSchema) -> BettingOption:
    return BettingOption(
        id=option.id,
        game_id=option.game_id,
        market_type=option.market_type,
        outcome_name=option.outcome_name,
        outcome_point=option.outcome_point,
        player_name=option.player_name,
        bookmaker=option.bookmaker,
        american_odds=option.american_odds,
        is_locked=option.is_locked,
    )


def _game_outcomes(entry: GameOptionsSchema, now: datetime) -> Iterable[OutcomeQuotes]:
    game = game_info_from_schema(entry.game)
    started = game.start_time <= now
    for market_type, outcomes in entry.betting_options.items():
        for outcome in outcomes.values():
            quotes = [
                BettingOption(
                    id=quote.id,
                    game_id=entry.game.id,
                    market_type=market_type,
                    outcome_name=outcome.outcome_name,
                    outcome_point=outcome.outcome_point,
                    player_name=outcome.player_name,
                    bookmaker=quote.bookmaker,
                    american_odds=quote.american_odds,
                    is_locked=quote.is_locked or started,
                )
                for quote in outcome.bookmakers
            ]
            if not quotes:
                logger.debug(
                    "Skipping %s %s on game %s: no bookmaker quotes",
                    market_type,
                    outcome.outcome_name,
                    entry.game.id,
                )
                continue
            yield OutcomeQuotes(
                game_id=entry.game.id,
                game=game,
                market_type=market_type,
                outcome_name=outcome.outcome_name,
                outcome_point=outcome.outcome_point,
                quotes=quotes,
            )


def build_weekly_board(
    response: WeeklyOptionsResponse, now: datetime | None = None
) -> list[OutcomeQuotes]:
    """Flatten the weekly payload into outcomes, in game/market/outcome order.

    Options on games that have already kicked off are marked locked.
    """

    now = now or datetime.now(timezone.utc)
    board: list[OutcomeQuotes] = []
    for entry in response.games:
        board.extend(_game_outcomes(entry, now))
    logger.info("Loaded %d outcomes across %d games for week %d", len(board), len(response.games), response.week)
    return board
