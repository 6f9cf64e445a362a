"""Submit a bet slip or parlay to the league backend."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from betleague.betslip.drafts import DraftStore
from betleague.betslip.slip import BetSlip
from betleague.config import get_settings
from betleague.context import SessionContext
from betleague.data.league_client import LeagueClient
from betleague.data.schemas import BatchBetItem, BatchBetRequest, ParlayBetRequest
from betleague.errors import LeagueApiError
from betleague.parlays.odds import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementResult:
    ok: bool
    message: str
    retryable: bool = False
    placed: int = 0


class BetPlacer:
    """Send the user's selections for the current week, one request per action.

    The slip is only cleared once the backend confirms; on any failure it is
    left exactly as it was so the user can try again. While one submission is
    outstanding a second one is refused rather than queued.
    """

    def __init__(
        self,
        client: LeagueClient,
        context: SessionContext,
        drafts: DraftStore | None = None,
    ) -> None:
        self.client = client
        self.context = context
        self.drafts = drafts
        self._in_flight = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def fetch_available_balance(self) -> float:
        bets = self.client.get_user_bets(self.context.week)
        return bets.available_balance(get_settings().weekly_budget)

    def open_slip(self) -> BetSlip:
        """Return the saved draft for this week, or an empty slip, sized to the live balance."""

        balance = self.fetch_available_balance()
        if self.drafts is not None:
            saved = self.drafts.load(self.context, balance)
            if saved is not None:
                return saved
        return BetSlip(balance)

    def _matchup_id(self) -> int | None:
        if self.context.matchup_id is None:
            matchup = self.client.get_user_matchup(self.context.league_id, self.context.week)
            if matchup is None:
                return None
            self.context = self.context.with_matchup(matchup.id)
        return self.context.matchup_id

    def place_bets(self, slip: BetSlip, now: datetime | None = None) -> PlacementResult:
        if not self._in_flight.acquire(blocking=False):
            return PlacementResult(False, "Bets are already being placed")
        try:
            return self._place_bets(slip, now)
        finally:
            self._in_flight.release()

    def place_parlay(self, slip: BetSlip, now: datetime | None = None) -> PlacementResult:
        if not self._in_flight.acquire(blocking=False):
            return PlacementResult(False, "Bets are already being placed")
        try:
            return self._place_parlay(slip, now)
        finally:
            self._in_flight.release()

    def _place_bets(self, slip: BetSlip, now: datetime | None) -> PlacementResult:
        if not slip.entries:
            return PlacementResult(False, "Bet slip is empty")
        slip.lock_started(now)
        if slip.has_locked_entries:
            return PlacementResult(False, "Remove bets on games that have already started")
        if any(entry.stake <= 0 for entry in slip.entries):
            return PlacementResult(False, "Every bet needs a stake above $0.00")

        try:
            matchup_id = self._matchup_id()
            if matchup_id is None:
                return PlacementResult(False, f"No matchup found for week {self.context.week}")
            request = BatchBetRequest(
                week=self.context.week,
                bets=[
                    BatchBetItem(matchup_id=matchup_id, betting_option_id=entry.option.id, amount=entry.stake)
                    for entry in slip.entries
                ],
            )
            self.client.place_batch_bets(request)
        except LeagueApiError as exc:
            logger.error("Failed to place %d bets: %s", len(slip), exc.message)
            return PlacementResult(False, f"Failed to place bets: {exc.message}", retryable=exc.retryable)

        placed = len(slip)
        staked = slip.total_stake
        slip.clear_entries()
        self._settle(slip, staked)
        logger.info("Placed %d bets totalling $%.2f for user %s", placed, staked, self.context.user_id)
        return PlacementResult(True, f"Successfully placed {placed} bet{'s' if placed != 1 else ''}!", placed=placed)

    def _place_parlay(self, slip: BetSlip, now: datetime | None) -> PlacementResult:
        ticket = slip.parlay
        slip.lock_started(now)
        if ticket.has_locked_legs:
            return PlacementResult(False, "Remove parlay legs on games that have already started")
        if not ticket.can_place:
            return PlacementResult(
                False,
                f"A parlay needs between {get_settings().min_parlay_legs} and {ticket.max_legs} legs",
            )
        if ticket.stake <= 0:
            return PlacementResult(False, "Parlay needs a stake above $0.00")

        try:
            matchup_id = self._matchup_id()
            if matchup_id is None:
                return PlacementResult(False, f"No matchup found for week {self.context.week}")
            request = ParlayBetRequest(
                matchup_id=matchup_id,
                betting_option_ids=[leg.id for leg in ticket.legs],
                amount=ticket.stake,
                week=self.context.week,
            )
            self.client.place_parlay_bet(request)
        except LeagueApiError as exc:
            logger.error("Failed to place parlay: %s", exc.message)
            return PlacementResult(False, f"Failed to place parlay: {exc.message}", retryable=exc.retryable)

        staked = ticket.stake
        legs = len(ticket.legs)
        ticket.clear()
        self._settle(slip, staked)
        return PlacementResult(True, f"Successfully placed {legs}-leg parlay!", placed=1)

    def _settle(self, slip: BetSlip, staked: float) -> None:
        slip.available_balance = round_half_up(Decimal(str(slip.available_balance)) - Decimal(str(staked)))
        if self.drafts is None:
            return
        if slip.entries or slip.parlay.legs:
            self.drafts.save(self.context, slip)
        else:
            self.drafts.discard(self.context)
