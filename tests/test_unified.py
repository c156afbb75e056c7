from __future__ import annotations

import unittest
from datetime import datetime, timezone

from banner_sync.ingestion.base import ProviderFetchError
from banner_sync.ingestion.sports import Provider, Sport, UnknownSportError
from banner_sync.ingestion.unified import UnifiedScoreboard
from banner_sync.schemas import Game


def _game(game_id: str, sport: str, source: str, status: str = "live") -> Game:
    return Game(
        id=game_id,
        sport=sport,
        source=source,
        home_team_id="ucsd",
        away_team_id="ucla",
        game_status=status,
        date=datetime(2026, 2, 10, 3, 0, tzinfo=timezone.utc),
    )


class FakeAdapter:
    """Stand-in adapter keyed by sport; values are game lists or exceptions."""

    def __init__(self, live=None, upcoming=None, games=None) -> None:
        self.live = live or {}
        self.upcoming = upcoming or {}
        self.games = games or {}
        self.calls: list[tuple[str, Sport]] = []

    def _answer(self, table, kind: str, sport: Sport):
        self.calls.append((kind, sport))
        value = table.get(sport, [])
        if isinstance(value, BaseException):
            raise value
        return value

    def fetch_live_games(self, sport):
        return self._answer(self.live, "live", sport)

    def fetch_upcoming_games(self, sport):
        return self._answer(self.upcoming, "upcoming", sport)

    def fetch_games(self, sport):
        return self._answer(self.games, "games", sport)


class UnifiedScoreboardTests(unittest.IsolatedAsyncioTestCase):
    async def test_live_games_tolerate_individual_failures(self) -> None:
        espn = FakeAdapter(
            live={
                Sport.BASKETBALL: [_game("401", "basketball", "espn")],
                Sport.BASEBALL: RuntimeError("boom"),
            }
        )
        ncaa = FakeAdapter(live={Sport.FOOTBALL: [_game("63", "football", "ncaa")]})
        scoreboard = UnifiedScoreboard({Provider.ESPN: espn, Provider.NCAA: ncaa})

        with self.assertLogs("banner_sync.ingestion.unified", level="ERROR"):
            games = await scoreboard.get_live_games()

        self.assertEqual(["401", "63"], [game.id for game in games])
        self.assertEqual(2, len(espn.calls))
        self.assertEqual(len(Sport) - 2, len(ncaa.calls))

    async def test_every_provider_failing_yields_empty_list(self) -> None:
        failure = RuntimeError("down")
        espn = FakeAdapter(upcoming={sport: failure for sport in Sport})
        ncaa = FakeAdapter(upcoming={sport: failure for sport in Sport})
        scoreboard = UnifiedScoreboard({Provider.ESPN: espn, Provider.NCAA: ncaa})

        with self.assertLogs("banner_sync.ingestion.unified", level="ERROR"):
            self.assertEqual([], await scoreboard.get_upcoming_games())

    async def test_games_for_sport_routes_to_one_provider(self) -> None:
        espn = FakeAdapter()
        ncaa = FakeAdapter(games={Sport.VOLLEYBALL: [_game("7", "volleyball", "ncaa")]})
        scoreboard = UnifiedScoreboard({Provider.ESPN: espn, Provider.NCAA: ncaa})

        games = await scoreboard.get_games_for_sport("volleyball")

        self.assertEqual(["7"], [game.id for game in games])
        self.assertEqual([], espn.calls)

    async def test_games_for_sport_propagates_provider_failure(self) -> None:
        ncaa = FakeAdapter(
            games={Sport.SOFTBALL: ProviderFetchError(Provider.NCAA, Sport.SOFTBALL, "timed out")}
        )
        scoreboard = UnifiedScoreboard({Provider.ESPN: FakeAdapter(), Provider.NCAA: ncaa})

        with self.assertRaises(ProviderFetchError):
            await scoreboard.get_games_for_sport("softball")

    async def test_games_for_unknown_sport(self) -> None:
        scoreboard = UnifiedScoreboard({Provider.ESPN: FakeAdapter(), Provider.NCAA: FakeAdapter()})

        with self.assertRaises(UnknownSportError):
            await scoreboard.get_games_for_sport("curling")

    async def test_connectivity_reports_each_provider(self) -> None:
        espn = FakeAdapter(
            games={
                Sport.BASKETBALL: [
                    _game("1", "basketball", "espn"),
                    _game("2", "basketball", "espn"),
                ]
            }
        )
        ncaa = FakeAdapter(
            games={Sport.FOOTBALL: ProviderFetchError(Provider.NCAA, Sport.FOOTBALL, "timed out")}
        )
        scoreboard = UnifiedScoreboard({Provider.ESPN: espn, Provider.NCAA: ncaa})

        report = await scoreboard.test_connectivity()

        self.assertTrue(report.espn)
        self.assertFalse(report.ncaa)
        self.assertEqual(
            [
                "ESPN API: working (2 basketball games found)",
                "NCAA API: error - timed out",
            ],
            report.details,
        )

    async def test_overview_combines_live_upcoming_and_status(self) -> None:
        espn = FakeAdapter(
            live={Sport.BASKETBALL: [_game("1", "basketball", "espn")]},
            upcoming={Sport.BASEBALL: [_game("2", "baseball", "espn", status="scheduled")]},
        )
        scoreboard = UnifiedScoreboard({Provider.ESPN: espn, Provider.NCAA: FakeAdapter()})

        overview = await scoreboard.get_overview()

        self.assertEqual(["1"], [game.id for game in overview.live_games])
        self.assertEqual(["2"], [game.id for game in overview.upcoming_games])
        self.assertEqual(len(Sport), overview.total_sports)
        self.assertEqual({"espn": True, "ncaa": True}, overview.api_status)

    def test_missing_adapter_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            UnifiedScoreboard({Provider.ESPN: FakeAdapter()})


if __name__ == "__main__":
    unittest.main()
