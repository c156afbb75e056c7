"""Fan-out across both scoreboard providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Mapping

from banner_sync.ingestion.base import ProviderFetchError, ScoreboardAdapter
from banner_sync.ingestion.sports import (
    Provider,
    Sport,
    classify,
    get_all_available_sports,
    parse_sport,
    sports_for,
)
from banner_sync.schemas import ConnectivityReport, Game, ScoreboardOverview

logger = logging.getLogger(__name__)

# Lightweight probe sport per provider.
PROBE_SPORTS: dict[Provider, Sport] = {
    Provider.ESPN: Sport.BASKETBALL,
    Provider.NCAA: Sport.FOOTBALL,
}


class UnifiedScoreboard:
    def __init__(self, adapters: Mapping[Provider, ScoreboardAdapter]) -> None:
        missing = [provider.value for provider in Provider if provider not in adapters]
        if missing:
            raise ValueError(f"Missing adapters for providers: {', '.join(missing)}")
        self.adapters = dict(adapters)

    async def _gather(
        self,
        fetch: Callable[[ScoreboardAdapter, Sport], list[Game]],
        label: str,
    ) -> list[Game]:
        calls: list[tuple[Provider, Sport]] = [
            (provider, sport)
            for provider in Provider
            for sport in sports_for(provider)
        ]
        results = await asyncio.gather(
            *(
                asyncio.to_thread(fetch, self.adapters[provider], sport)
                for provider, sport in calls
            ),
            return_exceptions=True,
        )

        games: list[Game] = []
        for (provider, sport), result in zip(calls, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Fetching %s games failed provider=%s sport=%s error=%s",
                    label,
                    provider.value,
                    sport.value,
                    result,
                )
                continue
            games.extend(result)
        logger.info("Collected %s %s games across %s calls", len(games), label, len(calls))
        return games

    async def get_live_games(self) -> list[Game]:
        return await self._gather(lambda adapter, sport: adapter.fetch_live_games(sport), "live")

    async def get_upcoming_games(self) -> list[Game]:
        return await self._gather(
            lambda adapter, sport: adapter.fetch_upcoming_games(sport), "upcoming"
        )

    async def get_games_for_sport(self, sport: str | Sport) -> list[Game]:
        """Games for one sport from the single provider that serves it.

        UnknownSportError and ProviderFetchError propagate to the caller.
        """

        parsed = parse_sport(sport)
        adapter = self.adapters[classify(parsed)]
        return await asyncio.to_thread(adapter.fetch_games, parsed)

    async def _probe(self, provider: Provider) -> tuple[bool, str]:
        sport = PROBE_SPORTS[provider]
        try:
            games = await asyncio.to_thread(self.adapters[provider].fetch_games, sport)
        except ProviderFetchError as exc:
            return False, f"{provider.value.upper()} API: error - {exc.detail}"
        except Exception as exc:
            logger.exception("Connectivity probe crashed provider=%s", provider.value)
            return False, f"{provider.value.upper()} API: error - {exc}"
        return True, f"{provider.value.upper()} API: working ({len(games)} {sport.value} games found)"

    async def test_connectivity(self) -> ConnectivityReport:
        (espn_ok, espn_detail), (ncaa_ok, ncaa_detail) = await asyncio.gather(
            self._probe(Provider.ESPN),
            self._probe(Provider.NCAA),
        )
        return ConnectivityReport(espn=espn_ok, ncaa=ncaa_ok, details=[espn_detail, ncaa_detail])

    async def get_overview(self) -> ScoreboardOverview:
        live_games, upcoming_games, connectivity = await asyncio.gather(
            self.get_live_games(),
            self.get_upcoming_games(),
            self.test_connectivity(),
        )
        return ScoreboardOverview(
            live_games=live_games,
            upcoming_games=upcoming_games,
            total_sports=len(get_all_available_sports()),
            api_status={"espn": connectivity.espn, "ncaa": connectivity.ncaa},
        )
