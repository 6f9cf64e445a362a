"""Dataclasses for betting options and parlay modeling."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Tuple

from betleague.errors import InvalidOddsError
from betleague.parlays.odds import american_to_decimal


class MarketType(str, Enum):
    MONEYLINE = "h2h"
    SPREAD = "spreads"
    TOTAL = "totals"
    TEAM_TOTAL = "team_totals"
    PLAYER_PASS_TDS = "player_pass_tds"
    PLAYER_PASS_YDS = "player_pass_yds"
    PLAYER_PASS_COMPLETIONS = "player_pass_completions"
    PLAYER_PASS_ATT = "player_pass_att"
    PLAYER_RUSH_YDS = "player_rush_yds"
    PLAYER_RUSH_ATT = "player_rush_att"
    PLAYER_RUSHING_TDS = "player_rushing_tds"
    PLAYER_RECEPTIONS = "player_receptions"
    PLAYER_RECEIVING_YDS = "player_receiving_yds"
    PLAYER_RECEIVING_TDS = "player_receiving_tds"


OutcomeKey = Tuple[str, str, str]


@dataclass(frozen=True)
class GameInfo:
    home_team: str
    away_team: str
    start_time: datetime

    @property
    def matchup_label(self) -> str:
        return f"{self.away_team} @ {self.home_team}"


@dataclass(frozen=True)
class BettingOption:
    """One bookmaker's quote for one outcome of one market on one game."""

    id: int
    game_id: str
    market_type: str
    outcome_name: str
    bookmaker: str
    american_odds: int
    outcome_point: float | None = None
    player_name: str | None = None
    is_locked: bool = False

    def __post_init__(self) -> None:
        if self.american_odds == 0:
            raise InvalidOddsError(f"Betting option {self.id} has American odds of 0")
        if isinstance(self.market_type, MarketType):
            object.__setattr__(self, "market_type", self.market_type.value)

    @property
    def decimal_odds(self) -> float:
        return american_to_decimal(self.american_odds)

    @property
    def outcome_key(self) -> OutcomeKey:
        return (self.game_id, self.market_type, self.outcome_name)

    @property
    def is_player_prop(self) -> bool:
        return self.market_type.startswith("player_")


@dataclass(frozen=True)
class ParlayLeg:
    leg_number: int
    betting_option_id: int
    game_id: str
    market_type: str
    outcome_name: str
    outcome_point: float | None
    player_name: str | None
    bookmaker: str
    american_odds: int
    decimal_odds: float


@dataclass(frozen=True)
class ParlayCalculation:
    stake: float
    decimal_odds: float
    payout: float
    profit: float
    legs: List[ParlayLeg] = field(default_factory=list)

    @property
    def leg_count(self) -> int:
        return len(self.legs)

    @property
    def betting_option_ids(self) -> list[int]:
        return [leg.betting_option_id for leg in self.legs]
