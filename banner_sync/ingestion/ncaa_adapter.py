"""Converts NCAA scoreboard games into normalized games."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from banner_sync.ingestion.base import ProviderFetchError, ScoreboardAdapter, safe_int, safe_score
from banner_sync.ingestion.ncaa_client import NCAAClientError, fetch_scoreboard
from banner_sync.ingestion.sports import Provider, Sport, parse_sport
from banner_sync.schemas import Game
from banner_sync.teams import ncaa_team_id


def map_ncaa_status(game_state: Any, current_period: Any) -> str:
    state = str(game_state or "").strip().lower()
    period = str(current_period or "").strip().upper()
    if state == "final":
        return "final"
    if state == "live":
        if period == "HALFTIME":
            return "halftime"
        return "live"
    return "scheduled"


def _names(side: Any) -> dict[str, Any]:
    if not isinstance(side, dict):
        return {}
    names = side.get("names")
    return names if isinstance(names, dict) else {}


def _epoch_to_utc(value: Any) -> datetime | None:
    seconds = safe_int(value)
    if seconds is None or seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class NCAAAdapter(ScoreboardAdapter):
    provider = Provider.NCAA

    def __init__(
        self,
        *,
        base_url: str | None = None,
        division: str = "d1",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url
        self.division = division

    def _fetch_raw_games(self, sport: Sport) -> list[Any]:
        try:
            payload = fetch_scoreboard(
                sport,
                self.division,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        except NCAAClientError as exc:
            raise ProviderFetchError(self.provider, sport, str(exc)) from exc
        games = payload.get("games")
        if not isinstance(games, list):
            raise ProviderFetchError(self.provider, sport, "scoreboard payload has no games list")
        return games

    def _side_names(self, side: Any) -> list[str | None]:
        names = _names(side)
        return [names.get("full"), names.get("short"), names.get("char6")]

    def _involves_tracked_team(self, raw: dict[str, Any]) -> bool:
        game = raw.get("game")
        if not isinstance(game, dict):
            return False
        return self.is_tracked_name(self._side_names(game.get("home"))) or self.is_tracked_name(
            self._side_names(game.get("away"))
        )

    def _team_id(self, side: Any) -> str | None:
        if self.is_tracked_name(self._side_names(side)):
            return self.tracked_team_id
        names = _names(side)
        return ncaa_team_id(names.get("short"), names.get("full"))

    def convert(self, raw: dict[str, Any], sport: str | Sport) -> Game | None:
        parsed_sport = parse_sport(sport)
        game = raw.get("game")
        if not isinstance(game, dict):
            return None

        home = game.get("home")
        away = game.get("away")
        if not _names(home) or not _names(away):
            return None
        home_team_id = self._team_id(home)
        away_team_id = self._team_id(away)
        if not home_team_id or not away_team_id:
            return None

        game_id = game.get("gameID")
        start_time = _epoch_to_utc(game.get("startTimeEpoch"))
        if not game_id or start_time is None:
            return None

        return Game(
            id=str(game_id),
            sport=parsed_sport.value,
            source=self.provider.value,
            home_team_id=home_team_id,
            away_team_id=away_team_id,
            home_score=safe_score(home.get("score")),
            away_score=safe_score(away.get("score")),
            game_status=map_ncaa_status(game.get("gameState"), game.get("currentPeriod")),
            game_time=str(game.get("startTime") or game.get("finalMessage") or ""),
            venue="TBD",
            period=str(game.get("currentPeriod") or ""),
            time_remaining=str(game.get("contestClock") or ""),
            date=start_time,
            is_enabled=True,
        )
