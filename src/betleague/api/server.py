"""FastAPI calculator service for odds and parlay pricing."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from betleague import __version__
from betleague.api.schemas import (
    BestOddsRequest,
    BestOddsResponse,
    OddsConvertRequest,
    OddsConvertResponse,
    ParlayLegOut,
    ParlayRequest,
    ParlayResponse,
)
from betleague.config import get_settings
from betleague.errors import ParlayValidationError
from betleague.formatting import format_american_odds, market_display_name, outcome_display_name
from betleague.parlays.engine import calculate_parlay_from_options, can_place_parlay
from betleague.parlays.odds import american_to_decimal, american_to_implied, select_best_odds
from betleague.parlays.types import BettingOption

settings = get_settings()

app = FastAPI(
    title="Bet League Calculator API",
    version=__version__,
    description="Odds conversion, best-price selection and parlay pricing for the league bet slip.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, Any]:
    return {
        "name": "betleague",
        "version": __version__,
        "weekly_budget": settings.weekly_budget,
        "max_parlay_legs": settings.max_parlay_legs,
    }


@app.post("/odds/convert", response_model=OddsConvertResponse)
def convert_odds(payload: OddsConvertRequest) -> OddsConvertResponse:
    odds = payload.american_odds
    return OddsConvertResponse(
        american_odds=odds,
        display=format_american_odds(odds),
        decimal_odds=round(american_to_decimal(odds), 4),
        implied_prob=round(american_to_implied(odds), 4),
    )


@app.post("/odds/best", response_model=BestOddsResponse)
def best_odds(payload: BestOddsRequest) -> BestOddsResponse:
    best = select_best_odds(payload.quotes)
    return BestOddsResponse(
        index=payload.quotes.index(best),
        bookmaker=best.bookmaker,
        american_odds=best.american_odds,
        decimal_odds=round(american_to_decimal(best.american_odds), 4),
    )


@app.post("/parlays/calculate", response_model=ParlayResponse)
def calculate_parlay(payload: ParlayRequest) -> ParlayResponse:
    options = [BettingOption(**leg.model_dump()) for leg in payload.legs]
    try:
        calc = calculate_parlay_from_options(payload.stake, options)
    except ParlayValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ParlayResponse(
        stake=calc.stake,
        decimal_odds=calc.decimal_odds,
        payout=calc.payout,
        profit=calc.profit,
        leg_count=calc.leg_count,
        can_place=can_place_parlay(options),
        legs=[
            ParlayLegOut(
                leg_number=leg.leg_number,
                betting_option_id=leg.betting_option_id,
                description=outcome_display_name(option),
                market=market_display_name(leg.market_type),
                bookmaker=leg.bookmaker,
                odds=format_american_odds(leg.american_odds),
                decimal_odds=round(leg.decimal_odds, 4),
            )
            for leg, option in zip(calc.legs, options)
        ],
    )
