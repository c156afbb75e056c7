"""Converts ESPN scoreboard events into normalized games."""

from __future__ import annotations

from typing import Any

from banner_sync.ingestion.base import (
    ProviderFetchError,
    ScoreboardAdapter,
    safe_int,
    safe_score,
    utc_from_iso,
)
from banner_sync.ingestion.espn_client import fetch_scoreboard
from banner_sync.ingestion.sports import Provider, Sport, parse_sport
from banner_sync.schemas import Game
from banner_sync.teams import espn_team_id

# Period number of the midpoint break while the clock reads zero.
HALFTIME_PERIODS: dict[Sport, int] = {
    Sport.BASKETBALL: 2,
}


def _safe_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _status_type(status: Any) -> dict[str, Any]:
    if not isinstance(status, dict):
        return {}
    status_type = status.get("type")
    return status_type if isinstance(status_type, dict) else {}


def map_espn_status(status: Any, sport: str | Sport) -> str:
    status_type = _status_type(status)
    state = str(status_type.get("state") or "").lower()
    name = str(status_type.get("name") or "").upper()

    if state == "post":
        return "final"
    if state == "in":
        if name == "STATUS_HALFTIME":
            return "halftime"
        midpoint = HALFTIME_PERIODS.get(parse_sport(sport))
        period = safe_int(status.get("period"))
        clock = _safe_float(status.get("clock"))
        if midpoint is not None and period == midpoint and clock == 0:
            return "halftime"
        return "live"
    return "scheduled"


def _ordinal(number: int) -> str:
    last = number % 10
    last_two = number % 100
    if last == 1 and last_two != 11:
        return f"{number}st"
    if last == 2 and last_two != 12:
        return f"{number}nd"
    if last == 3 and last_two != 13:
        return f"{number}rd"
    return f"{number}th"


def format_period(period: int | None, sport: Sport) -> str:
    if not period or period < 1:
        return ""
    if sport is Sport.BASKETBALL:
        if period <= 4:
            return f"Q{period}"
        return f"OT{period - 4}"
    if sport is Sport.BASEBALL:
        return _ordinal(period)
    return str(period)


def format_clock(seconds: float | None) -> str:
    if seconds is None or seconds < 0:
        return ""
    whole = int(seconds)
    return f"{whole // 60}:{whole % 60:02d}"


def _first_competition(event: dict[str, Any]) -> dict[str, Any] | None:
    competitions = event.get("competitions")
    if isinstance(competitions, list) and competitions and isinstance(competitions[0], dict):
        return competitions[0]
    return None


def _competitors(competition: dict[str, Any]) -> list[dict[str, Any]]:
    competitors = competition.get("competitors")
    if not isinstance(competitors, list):
        return []
    return [competitor for competitor in competitors if isinstance(competitor, dict)]


def _team_names(team: dict[str, Any]) -> list[str | None]:
    return [
        team.get("abbreviation"),
        team.get("displayName"),
        team.get("shortDisplayName"),
        team.get("name"),
    ]


class ESPNAdapter(ScoreboardAdapter):
    provider = Provider.ESPN

    def __init__(self, *, base_url: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url

    def _fetch_raw_games(self, sport: Sport) -> list[Any]:
        payload = fetch_scoreboard(sport, base_url=self.base_url, timeout=self.timeout)
        if payload.get("error"):
            detail = payload.get("details") or payload.get("error")
            raise ProviderFetchError(self.provider, sport, str(detail))
        events = payload.get("events")
        if not isinstance(events, list):
            raise ProviderFetchError(self.provider, sport, "scoreboard payload has no events list")
        return events

    def _involves_tracked_team(self, raw: dict[str, Any]) -> bool:
        competition = _first_competition(raw)
        if competition is None:
            return False
        for competitor in _competitors(competition):
            team = competitor.get("team")
            if isinstance(team, dict) and self.is_tracked_name(_team_names(team)):
                return True
        return False

    def _team_id(self, team: dict[str, Any]) -> str | None:
        if self.is_tracked_name(_team_names(team)):
            return self.tracked_team_id
        return espn_team_id(team.get("abbreviation"), team.get("displayName"))

    def convert(self, raw: dict[str, Any], sport: str | Sport) -> Game | None:
        parsed_sport = parse_sport(sport)
        competition = _first_competition(raw)
        if competition is None:
            return None

        home = None
        away = None
        for competitor in _competitors(competition):
            home_away = competitor.get("homeAway")
            if home_away == "home":
                home = competitor
            elif home_away == "away":
                away = competitor
        if home is None or away is None:
            return None

        home_team = home.get("team")
        away_team = away.get("team")
        if not isinstance(home_team, dict) or not isinstance(away_team, dict):
            return None
        home_team_id = self._team_id(home_team)
        away_team_id = self._team_id(away_team)
        if not home_team_id or not away_team_id:
            return None

        event_id = raw.get("id") or competition.get("id")
        start_time = utc_from_iso(raw.get("date") or competition.get("date"))
        if not event_id or start_time is None:
            return None

        status = raw.get("status") if isinstance(raw.get("status"), dict) else competition.get("status")
        if not isinstance(status, dict):
            status = {}
        game_status = map_espn_status(status, parsed_sport)
        status_type = _status_type(status)

        venue = competition.get("venue")
        venue_name = venue.get("fullName") if isinstance(venue, dict) else None

        return Game(
            id=str(event_id),
            sport=parsed_sport.value,
            source=self.provider.value,
            home_team_id=home_team_id,
            away_team_id=away_team_id,
            home_score=safe_score(home.get("score")),
            away_score=safe_score(away.get("score")),
            game_status=game_status,
            game_time=str(status_type.get("shortDetail") or status_type.get("detail") or ""),
            venue=str(venue_name or "TBD"),
            period=format_period(safe_int(status.get("period")), parsed_sport),
            time_remaining=(
                format_clock(_safe_float(status.get("clock"))) if game_status == "live" else ""
            ),
            date=start_time,
            is_enabled=True,
        )
