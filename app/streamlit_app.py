"""Streamlit betting board for the fantasy betting league."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd
import streamlit as st

from betleague.betslip.drafts import DraftStore
from betleague.betslip.placement import BetPlacer, PlacementResult
from betleague.betslip.slip import BetSlip, Notice
from betleague.config import get_settings
from betleague.context import SessionContext
from betleague.data.ingestion import OutcomeQuotes, build_weekly_board, option_from_schema
from betleague.data.league_client import LeagueClient
from betleague.data.schemas import LeagueSchema
from betleague.db.database import init_db
from betleague.errors import LeagueApiError
from betleague.formatting import (
    compact_game_time,
    format_american_odds,
    market_display_name,
    outcome_display_name,
    time_until_start,
)

settings = get_settings()
init_db()

st.set_page_config(page_title="Bet League", layout="wide", page_icon="🏈")
st.title("🏈 Bet League")
st.caption(f"${settings.weekly_budget:.0f} to play with every week. Entertainment purposes only.")


def _client() -> LeagueClient:
    if "client" not in st.session_state:
        st.session_state.client = LeagueClient()
    return st.session_state.client


def _notify(result: Notice | PlacementResult) -> None:
    ok = result.accepted if isinstance(result, Notice) else result.ok
    if not result.message:
        return
    if ok:
        st.toast(result.message, icon="✅")
    else:
        st.toast(result.message, icon="⚠️")


@st.cache_data(show_spinner=False, ttl=60)
def load_board(week: int, token: str | None) -> list[OutcomeQuotes]:
    return build_weekly_board(_client().get_weekly_betting_options(week))


def render_login() -> None:
    client = _client()
    if client.token:
        st.caption("Signed in")
        if st.button("Sign out"):
            client.clear_token()
            st.session_state.pop("placer", None)
            st.session_state.pop("slip", None)
            st.session_state.pop("user", None)
            st.rerun()
        return
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        try:
            auth = client.login(email, password)
        except LeagueApiError as exc:
            st.error(f"Sign in failed: {exc.message}")
            return
        st.session_state.user = auth.user
        st.rerun()


def _placer(league_id: int, week: int) -> BetPlacer | None:
    user = st.session_state.get("user")
    if user is None:
        return None
    placer: BetPlacer | None = st.session_state.get("placer")
    if placer is None or placer.context.week != week or placer.context.league_id != league_id:
        context = SessionContext(user_id=user.id, league_id=league_id, week=week, username=user.username)
        placer = BetPlacer(_client(), context, drafts=DraftStore())
        try:
            slip = placer.open_slip()
        except LeagueApiError as exc:
            st.error(f"Failed to load your balance: {exc.message}")
            if exc.retryable:
                st.caption("The league server may be busy; reload the page to try again.")
            st.stop()
        st.session_state.placer = placer
        st.session_state.slip = slip
    return placer


def select_league() -> LeagueSchema | None:
    try:
        leagues = _client().get_user_leagues()
    except LeagueApiError as exc:
        st.error(f"Failed to load your leagues: {exc.message}")
        return None
    if not leagues:
        st.info("You are not in a league yet. Join one to start betting.")
        return None
    return st.selectbox("League", leagues, format_func=lambda league: league.name)


def render_board(board: Sequence[OutcomeQuotes], slip: BetSlip) -> None:
    st.subheader("This week's board")
    if not board:
        st.info("No betting options are available for this week yet.")
        return
    by_game: dict[str, list[OutcomeQuotes]] = {}
    for outcome in board:
        by_game.setdefault(outcome.game_id, []).append(outcome)
    for game_id, outcomes in by_game.items():
        game = outcomes[0].game
        with st.expander(f"{game.matchup_label} · {compact_game_time(game.start_time)}"):
            st.caption(f"Kickoff in {time_until_start(game.start_time)}")
            for idx, outcome in enumerate(outcomes):
                best = outcome.best
                cols = st.columns([0.5, 0.2, 0.15, 0.15])
                cols[0].write(f"**{market_display_name(outcome.market_type)}** · {outcome_display_name(best)}")
                cols[1].write(f"{best.bookmaker} {format_american_odds(best.american_odds)}")
                key = f"{game_id}-{idx}"
                if cols[2].button("Add", key=f"add-{key}", disabled=best.is_locked):
                    _notify(slip.add(best, game))
                if cols[3].button("Parlay", key=f"leg-{key}", disabled=best.is_locked):
                    _notify(slip.add_parlay_leg(best, game))
                if len(outcome.quotes) > 1:
                    st.caption(
                        "Other books: "
                        + ", ".join(
                            f"{quote.bookmaker} {format_american_odds(quote.american_odds)}"
                            for quote in outcome.quotes
                            if quote is not best
                        )
                    )


def render_slip(slip: BetSlip, placer: BetPlacer) -> None:
    st.subheader("Bet slip")
    summary = slip.summary()
    cols = st.columns(3)
    cols[0].metric("Remaining", f"${summary.remaining_budget:.2f}")
    cols[1].metric("Staked", f"${summary.total_stake:.2f}", f"{summary.budget_used_pct:.0f}% of budget")
    cols[2].metric("To win", f"${summary.total_profit:.2f}")
    if not slip.entries:
        st.caption("Pick outcomes from the board to build your slip.")
    for entry in slip.entries:
        option = entry.option
        with st.container(border=True):
            st.write(f"**{outcome_display_name(option)}** · {entry.game_info.matchup_label}")
            st.caption(f"{market_display_name(option.market_type)} · {option.bookmaker} {format_american_odds(option.american_odds)}")
            stake = st.number_input(
                "Stake ($)",
                min_value=0.0,
                max_value=float(slip.remaining_budget + entry.stake),
                value=float(entry.stake),
                step=1.0,
                key=f"stake-{entry.entry_id}",
            )
            if stake != entry.stake:
                _notify(slip.update_stake(entry.entry_id, stake))
            st.caption(f"Payout ${entry.potential_payout:.2f}")
            if st.button("Remove", key=f"rm-{entry.entry_id}"):
                _notify(slip.remove(entry.entry_id))
                st.rerun()
    if slip.entries and st.button("Place bets", type="primary", disabled=placer.in_flight, use_container_width=True):
        result = placer.place_bets(slip)
        _notify(result)
        if not result.ok and result.retryable:
            st.warning("Your selections are still on the slip; try again in a moment.")


def render_parlay(slip: BetSlip, placer: BetPlacer) -> None:
    st.subheader("Parlay")
    ticket = slip.parlay
    if not ticket.legs:
        st.caption("Add at least two legs from the board to build a parlay.")
        return
    stake = st.number_input(
        "Parlay stake ($)",
        min_value=0.0,
        max_value=float(slip.remaining_budget + ticket.stake),
        value=float(ticket.stake),
        step=1.0,
    )
    if stake != ticket.stake:
        _notify(slip.set_parlay_stake(stake))
    calc = slip.parlay_calculation
    if calc is not None:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "leg": leg.leg_number,
                        "market": market_display_name(leg.market_type),
                        "pick": leg.outcome_name,
                        "book": leg.bookmaker,
                        "odds": format_american_odds(leg.american_odds),
                    }
                    for leg in calc.legs
                ]
            ),
            hide_index=True,
            use_container_width=True,
        )
        cols = st.columns(3)
        cols[0].metric("Odds", f"{calc.decimal_odds:.4f}x")
        cols[1].metric("Return", f"${calc.payout:.2f}")
        cols[2].metric("Profit", f"${calc.profit:.2f}")
    for leg in ticket.legs:
        if st.button(f"Drop {outcome_display_name(leg)}", key=f"drop-{leg.id}"):
            _notify(slip.remove_parlay_leg(leg.id))
            st.rerun()
    if st.button("Place parlay", type="primary", disabled=not ticket.can_place or placer.in_flight, use_container_width=True):
        _notify(placer.place_parlay(slip))


def render_placed_bets(week: int) -> None:
    st.subheader("Placed this week")
    try:
        bets = _client().get_user_bets(week)
    except LeagueApiError as exc:
        st.error(f"Failed to load placed bets: {exc.message}")
        return
    rows = []
    for bet in bets.bets:
        if bet.betting_option is None:
            continue
        option = option_from_schema(bet.betting_option)
        rows.append(
            {
                "pick": outcome_display_name(option),
                "market": market_display_name(option.market_type),
                "odds": format_american_odds(option.american_odds),
                "stake": bet.amount,
                "status": bet.status,
            }
        )
    if rows:
        st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)
    else:
        st.caption("No bets placed yet this week.")


def render_standings(league: LeagueSchema) -> None:
    st.subheader(f"{league.name} standings")
    try:
        standings = _client().get_league_standings(league.id)
    except LeagueApiError as exc:
        st.error(f"Failed to load standings: {exc.message}")
        return
    if not standings:
        st.caption("No results yet.")
        return
    st.dataframe(
        pd.DataFrame([row.model_dump(include={"rank", "username", "wins", "losses", "ties", "points_for"}) for row in standings]),
        hide_index=True,
        use_container_width=True,
    )


# ----- Sidebar Controls -------------------------------------------------------
with st.sidebar:
    render_login()
    league = select_league() if st.session_state.get("user") is not None else None
    week = int(st.number_input("Week", value=1, min_value=1, max_value=22, step=1))

if st.session_state.get("user") is None:
    st.info("Sign in to see this week's board.")
    st.stop()
if league is None:
    st.stop()

placer = _placer(league.id, week)
slip: BetSlip = st.session_state.slip
with st.sidebar:
    if st.button("Save slip for later"):
        placer.drafts.save(placer.context, slip)
        st.toast("Slip saved", icon="💾")

# ----- Page Layout ------------------------------------------------------------
col_main, col_right = st.columns([0.62, 0.38], gap="large")

with col_main:
    try:
        render_board(load_board(week, _client().token), slip)
    except LeagueApiError as exc:
        st.error(f"Failed to load betting options: {exc.message}")
    render_placed_bets(week)
    render_standings(league)

with col_right:
    render_slip(slip, placer)
    render_parlay(slip, placer)
