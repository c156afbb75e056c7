"""Shared fetch/filter behaviour for scoreboard providers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from banner_sync import metrics
from banner_sync.ingestion.sports import Provider, Sport, UnknownSportError, classify, parse_sport
from banner_sync.schemas import Game
from banner_sync.settings import DEFAULT_TRACKED_TEAM_ALIASES
from banner_sync.teams import matches_aliases

logger = logging.getLogger(__name__)


class ProviderFetchError(RuntimeError):
    """A scoreboard request failed at the transport, status or payload level."""

    def __init__(self, provider: Provider, sport: Sport, detail: str) -> None:
        super().__init__(f"{provider.value} scoreboard failed for sport={sport.value}: {detail}")
        self.provider = provider
        self.sport = sport
        self.detail = detail


def safe_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def safe_score(value: Any) -> int:
    parsed = safe_int(value)
    if parsed is None or parsed < 0:
        return 0
    return parsed


def utc_from_iso(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class ScoreboardAdapter:
    """Base class for one upstream provider.

    Subclasses implement ``_fetch_raw_games`` (raising ProviderFetchError),
    ``_involves_tracked_team`` and ``convert``.
    """

    provider: Provider

    def __init__(
        self,
        *,
        tracked_team_id: str = "ucsd",
        tracked_aliases: Iterable[str] = DEFAULT_TRACKED_TEAM_ALIASES,
        timeout: float = 10.0,
    ) -> None:
        self.tracked_team_id = tracked_team_id
        self.tracked_aliases = tuple(alias.lower() for alias in tracked_aliases)
        self.timeout = timeout

    def _fetch_raw_games(self, sport: Sport) -> list[Any]:
        raise NotImplementedError

    def _involves_tracked_team(self, raw: dict[str, Any]) -> bool:
        raise NotImplementedError

    def convert(self, raw: dict[str, Any], sport: str | Sport) -> Game | None:
        raise NotImplementedError

    def is_tracked_name(self, names: Iterable[str | None]) -> bool:
        return matches_aliases(names, self.tracked_aliases)

    def fetch_games(self, sport: str | Sport) -> list[Game]:
        """Return every tracked-institution game on today's scoreboard.

        Raises ProviderFetchError when the provider cannot be read and
        UnknownSportError when this provider does not serve *sport*.
        """

        parsed = parse_sport(sport)
        if classify(parsed) is not self.provider:
            raise UnknownSportError(parsed.value)

        try:
            raw_games = self._fetch_raw_games(parsed)
        except ProviderFetchError:
            metrics.record_fetch_failure(self.provider.value, parsed.value)
            raise
        except Exception as exc:
            metrics.record_fetch_failure(self.provider.value, parsed.value)
            logger.exception(
                "Unexpected %s scoreboard failure sport=%s", self.provider.value, parsed.value
            )
            raise ProviderFetchError(self.provider, parsed, f"{type(exc).__name__}: {exc}") from exc
        metrics.record_fetch_success(self.provider.value, parsed.value)

        games: list[Game] = []
        for raw in raw_games:
            if not isinstance(raw, dict) or not self._involves_tracked_team(raw):
                continue
            game = self.convert(raw, parsed)
            if game is None:
                logger.debug("Skipped unconvertible %s game sport=%s", self.provider.value, parsed.value)
                continue
            games.append(game)
        return games

    def _fetch_quietly(self, sport: str | Sport) -> list[Game]:
        try:
            return self.fetch_games(sport)
        except ProviderFetchError as exc:
            logger.error("Fetch error provider=%s sport=%s error=%s", self.provider.value, exc.sport.value, exc.detail)
            return []

    def fetch_live_games(self, sport: str | Sport) -> list[Game]:
        """Tracked games in progress or finished; [] when the provider fails."""
        return [game for game in self._fetch_quietly(sport) if game.game_status != "scheduled"]

    def fetch_upcoming_games(self, sport: str | Sport) -> list[Game]:
        """Tracked games not yet started; [] when the provider fails."""
        return [game for game in self._fetch_quietly(sport) if game.game_status == "scheduled"]
