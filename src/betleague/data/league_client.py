"""Thin client for the fantasy betting league REST backend."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from betleague.config import get_settings
from betleague.data.schemas import (
    AuthResponse,
    BatchBetRequest,
    CurrentUserResponse,
    LeagueSchema,
    MatchupResponse,
    MatchupSchema,
    ParlayBetRequest,
    PlacementResponse,
    StandingSchema,
    StandingsResponse,
    UserBetsResponse,
    UserLeaguesResponse,
    UserSchema,
    WeeklyOptionsResponse,
)
from betleague.errors import LeagueApiError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _retry_log(retry_state: RetryCallState) -> None:  # pragma: no cover - logging helper
    attempt = retry_state.attempt_number
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("League API retry attempt %s due to %s", attempt, exception)


class LeagueClient:
    """Typed wrapper around the league backend.

    Reads retry on transport failures. Writes (bet placement) are sent exactly
    once per call; a failed placement is reported to the caller, who decides
    whether the user retries.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.token = token or settings.league_api_token or None
        self.base_url = (base_url or settings.league_api_base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=settings.request_timeout,
            transport=transport,
        )

    def __enter__(self) -> "LeagueClient":  # pragma: no cover - context sugar
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def set_token(self, token: str) -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = None

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_fixed(0.5),
        after=_retry_log,
        reraise=True,
    )
    def _fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self._client.get(path, params=params, headers=self._headers())

    def _get(self, path: str, schema: Type[SchemaT], params: Optional[Dict[str, Any]] = None) -> SchemaT:
        try:
            response = self._fetch(path, params)
        except httpx.TransportError as exc:
            raise LeagueApiError(f"Network error: {exc}") from exc
        return self._parse(response, schema)

    def _post(self, path: str, payload: Dict[str, Any], schema: Type[SchemaT]) -> SchemaT:
        try:
            response = self._client.post(path, json=payload, headers=self._headers())
        except httpx.TransportError as exc:
            raise LeagueApiError(f"Network error: {exc}") from exc
        return self._parse(response, schema)

    @staticmethod
    def _parse(response: httpx.Response, schema: Type[SchemaT]) -> SchemaT:
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("error") if isinstance(body, dict) else None
            raise LeagueApiError(detail or f"HTTP {response.status_code}", response.status_code)
        try:
            return schema.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise LeagueApiError(
                f"Malformed response from {response.request.url.path}: {exc}",
                response.status_code,
            ) from exc

    def login(self, email: str, password: str) -> AuthResponse:
        auth = self._post("/api/auth/login", {"email": email, "password": password}, AuthResponse)
        self.set_token(auth.access_token)
        return auth

    def get_current_user(self) -> UserSchema:
        return self._get("/api/auth/me", CurrentUserResponse).user

    def get_weekly_betting_options(self, week: int) -> WeeklyOptionsResponse:
        """Return every game for the week with bookmaker quotes grouped by outcome."""

        return self._get(f"/api/bets/options/week/{week}", WeeklyOptionsResponse)

    def get_user_bets(self, week: int) -> UserBetsResponse:
        """Return bets already placed this week and the balance left."""

        return self._get(f"/api/bets/user/{week}", UserBetsResponse)

    def get_user_leagues(self) -> list[LeagueSchema]:
        return self._get("/api/leagues/user", UserLeaguesResponse).leagues

    def get_league_standings(self, league_id: int) -> list[StandingSchema]:
        standings = self._get(f"/api/leagues/{league_id}/standings", StandingsResponse).standings
        return sorted(standings, key=lambda row: (row.rank is None, row.rank or 0))

    def get_user_matchup(self, league_id: int, week: int) -> MatchupSchema | None:
        return self._get(f"/api/bets/matchup/{league_id}/{week}", MatchupResponse).matchup

    def place_batch_bets(self, request: BatchBetRequest) -> PlacementResponse:
        logger.info("Placing %d bets for week %d", len(request.bets), request.week)
        return self._post("/api/bets/batch", request.model_dump(), PlacementResponse)

    def place_parlay_bet(self, request: ParlayBetRequest) -> PlacementResponse:
        logger.info(
            "Placing %d-leg parlay for $%.2f in matchup %d",
            len(request.betting_option_ids),
            request.amount,
            request.matchup_id,
        )
        return self._post("/api/bets/parlay", request.model_dump(), PlacementResponse)
