"""Pydantic schemas for league backend responses and requests."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _nonzero_odds(value: int) -> int:
    if value == 0:
        raise ValueError("american_odds must not be 0")
    return value


AmericanOdds = Annotated[int, AfterValidator(_nonzero_odds)]


class UserSchema(BaseModel):
    id: int
    username: str
    email: str | None = None


class AuthResponse(BaseModel):
    message: str = ""
    access_token: str
    user: UserSchema


class CurrentUserResponse(BaseModel):
    user: UserSchema


class GameSchema(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    home_team: str
    away_team: str
    start_time: datetime
    week: int | None = None
    result: str | None = None


class BookmakerQuoteSchema(BaseModel):
    id: int
    bookmaker: str
    american_odds: AmericanOdds
    decimal_odds: float | None = Field(default=None, gt=1.0)
    is_locked: bool = False


class OutcomeQuotesSchema(BaseModel):
    outcome_name: str
    outcome_point: float | None = None
    player_name: str | None = None
    bookmakers: list[BookmakerQuoteSchema] = Field(default_factory=list)


class GameOptionsSchema(BaseModel):
    game: GameSchema
    # market_type -> outcome key -> quotes from every bookmaker
    betting_options: dict[str, dict[str, OutcomeQuotesSchema]] = Field(default_factory=dict)


class WeeklyOptionsResponse(BaseModel):
    week: int
    games: list[GameOptionsSchema]


class BettingOptionSchema(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: int
    game_id: str
    market_type: str
    outcome_name: str
    outcome_point: float | None = None
    player_name: str | None = None
    bookmaker: str
    american_odds: AmericanOdds
    decimal_odds: float | None = Field(default=None, gt=1.0)
    is_locked: bool = False


class PlacedBetSchema(BaseModel):
    id: int
    amount: float = Field(ge=0.0)
    potential_payout: float | None = None
    status: str = "pending"
    matchup_id: int | None = None
    betting_option: BettingOptionSchema | None = None


class UserBetsResponse(BaseModel):
    week: int
    bets: list[PlacedBetSchema] = Field(default_factory=list)
    parlay_bets: list[dict] = Field(default_factory=list)
    total_bet_amount: float = 0.0
    total_regular_bet_amount: float = 0.0
    total_parlay_bet_amount: float = 0.0
    remaining_balance: float | None = None

    def available_balance(self, weekly_budget: float) -> float:
        """Balance left for new wagers this week."""

        if self.remaining_balance is not None:
            return self.remaining_balance
        return weekly_budget - self.total_bet_amount


class LeagueSchema(BaseModel):
    id: int
    name: str
    description: str | None = None
    invite_code: str | None = None
    is_commissioner: bool = False
    is_setup_complete: bool = True
    member_count: int | None = None


class UserLeaguesResponse(BaseModel):
    leagues: list[LeagueSchema] = Field(default_factory=list)


class StandingSchema(BaseModel):
    user_id: int
    username: str
    rank: int | None = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0


class StandingsResponse(BaseModel):
    standings: list[StandingSchema] = Field(default_factory=list)


class MatchupSchema(BaseModel):
    id: int
    league_id: int
    week: int
    user1_id: int
    user2_id: int
    user1_username: str | None = None
    user2_username: str | None = None
    winner_id: int | None = None


class MatchupResponse(BaseModel):
    matchup: MatchupSchema | None = None


class BatchBetItem(BaseModel):
    matchup_id: int
    betting_option_id: int
    amount: float = Field(ge=0.0)


class BatchBetRequest(BaseModel):
    bets: list[BatchBetItem] = Field(min_length=1)
    week: int


class ParlayBetRequest(BaseModel):
    matchup_id: int
    betting_option_ids: list[int] = Field(min_length=2)
    amount: float = Field(ge=0.0)
    week: int


class PlacementResponse(BaseModel):
    message: str = ""
    total_amount: float | None = None
