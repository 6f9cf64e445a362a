"""Pydantic schemas for the odds and parlay calculator API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from betleague.data.schemas import AmericanOdds


class OddsConvertRequest(BaseModel):
    american_odds: AmericanOdds


class OddsConvertResponse(BaseModel):
    american_odds: int
    display: str
    decimal_odds: float
    implied_prob: float


class QuoteIn(BaseModel):
    bookmaker: str
    american_odds: AmericanOdds
    decimal_odds: float | None = None


class BestOddsRequest(BaseModel):
    quotes: list[QuoteIn] = Field(min_length=1)


class BestOddsResponse(BaseModel):
    index: int
    bookmaker: str
    american_odds: int
    decimal_odds: float


class LegIn(BaseModel):
    id: int
    game_id: str
    market_type: str
    outcome_name: str
    outcome_point: float | None = None
    player_name: str | None = None
    bookmaker: str
    american_odds: AmericanOdds
    is_locked: bool = False


class ParlayRequest(BaseModel):
    stake: float = Field(ge=0.0)
    legs: list[LegIn]


class ParlayLegOut(BaseModel):
    leg_number: int
    betting_option_id: int
    description: str
    market: str
    bookmaker: str
    odds: str
    decimal_odds: float


class ParlayResponse(BaseModel):
    stake: float
    decimal_odds: float
    payout: float
    profit: float
    leg_count: int
    can_place: bool
    legs: list[ParlayLegOut]
