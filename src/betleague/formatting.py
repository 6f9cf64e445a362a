"""Display helpers for odds, markets, outcomes and kickoff times."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from betleague.parlays.types import BettingOption

MARKET_DISPLAY_NAMES = {
    "h2h": "Moneyline",
    "spreads": "Spread",
    "totals": "Total",
    "team_totals": "Team Total",
    "player_pass_tds": "Pass TDs",
    "player_pass_yds": "Pass Yards",
    "player_rush_yds": "Rush Yards",
    "player_receptions": "Receptions",
    "player_pass_completions": "Completions",
    "player_rush_att": "Rush Attempts",
    "player_pass_att": "Pass Attempts",
    "player_receiving_yds": "Receiving Yards",
    "player_receiving_tds": "Receiving TDs",
    "player_rushing_tds": "Rushing TDs",
}


def format_american_odds(odds: int) -> str:
    return f"+{odds}" if odds > 0 else str(odds)


def format_point(point: float) -> str:
    return f"{point:g}"


def market_display_name(market_type: str) -> str:
    try:
        return MARKET_DISPLAY_NAMES[market_type]
    except KeyError:
        return " ".join(word[:1].upper() + word[1:] for word in market_type.split("_"))


def outcome_display_name(option: BettingOption) -> str:
    """Human readable label for the outcome an option backs."""

    point = option.outcome_point
    if option.is_player_prop:
        player = option.player_name or "Player"
        label = f"{market_display_name(option.market_type)} - {player} {option.outcome_name}"
        return f"{label} {format_point(point)}" if point is not None else label
    if point is None:
        return option.outcome_name
    if option.market_type == "spreads":
        sign = "+" if point > 0 else ""
        return f"{option.outcome_name} {sign}{format_point(point)}"
    if option.market_type in ("totals", "team_totals"):
        return f"{option.outcome_name} {format_point(point)}"
    return option.outcome_name


def _clock(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def _relative_day(start: datetime, now: datetime) -> str | None:
    delta = (start.date() - now.date()).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Tomorrow"
    return None


def _localize(start: datetime, now: datetime | None) -> tuple[datetime, datetime]:
    now = now or datetime.now(timezone.utc)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if now.tzinfo is not None:
        start = start.astimezone(now.tzinfo)
    else:
        now = now.replace(tzinfo=start.tzinfo)
    return start, now


def compact_game_time(start: datetime, now: datetime | None = None) -> str:
    start, now = _localize(start, now)
    day = _relative_day(start, now) or start.strftime("%a")
    return f"{day} {_clock(start)}"


def detailed_game_time(start: datetime, now: datetime | None = None) -> str:
    start, now = _localize(start, now)
    date_label = f"{start.strftime('%b')} {start.day}"
    day = _relative_day(start, now)
    if day:
        return f"{day}, {date_label} at {_clock(start)}"
    return f"{start.strftime('%a')}, {date_label} at {_clock(start)}"


def time_until_start(start: datetime, now: datetime | None = None) -> str:
    start, now = _localize(start, now)
    remaining = start - now
    if remaining <= timedelta(0):
        return "Started"
    minutes_total = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(minutes_total, 60)
    return f"{hours}h {minutes}m" if hours else f"{minutes}m"
