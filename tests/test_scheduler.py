from __future__ import annotations

import asyncio
import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from banner_sync.db import make_session_factory
from banner_sync.ingestion.sports import UnknownSportError, parse_sport
from banner_sync.scheduler import BannerSyncService, GameNotFoundError, build_store
from banner_sync.schemas import Game
from banner_sync.settings import load_settings
from banner_sync.storage.sql_store import SqlBannerStore


def _game(game_id: str, status: str = "live", home_score: int = 0) -> Game:
    return Game(
        id=game_id,
        sport="basketball",
        source="espn",
        home_team_id="ucsd",
        away_team_id="ucla",
        home_score=home_score,
        game_status=status,
        date=datetime(2026, 2, 10, 3, 0, tzinfo=timezone.utc),
    )


class FakeScoreboard:
    def __init__(self, live=None, upcoming=None, fail_live: bool = False) -> None:
        self.live = live or []
        self.upcoming = upcoming or []
        self.fail_live = fail_live
        self.live_calls = 0
        self.active = 0
        self.max_active = 0

    async def get_live_games(self):
        self.live_calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.01)
            if self.fail_live:
                raise RuntimeError("scoreboard down")
            return list(self.live)
        finally:
            self.active -= 1

    async def get_upcoming_games(self):
        return list(self.upcoming)

    async def get_games_for_sport(self, sport):
        parse_sport(sport)
        return list(self.live) + list(self.upcoming)


def _store() -> SqlBannerStore:
    return SqlBannerStore(make_session_factory("sqlite:///:memory:"))


class AutoSyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_start_runs_immediately_and_double_start_is_a_noop(self) -> None:
        scoreboard = FakeScoreboard()
        service = BannerSyncService(scoreboard, _store(), interval_minutes=5)

        await service.start_auto_sync()
        first_task = service._task
        await service.start_auto_sync(10)

        self.assertTrue(service.is_running)
        self.assertIs(first_task, service._task)
        self.assertEqual(1, scoreboard.live_calls)
        self.assertEqual(5, service.interval_minutes)
        self.assertIsNotNone(service.last_sync_at)

        await service.stop_auto_sync()

        self.assertFalse(service.is_running)
        self.assertIsNone(service._task)
        self.assertTrue(first_task.done())

    async def test_loop_fires_on_interval_until_stopped(self) -> None:
        scoreboard = FakeScoreboard()
        service = BannerSyncService(scoreboard, _store(), interval_minutes=1)

        with patch("banner_sync.scheduler.SECONDS_PER_MINUTE", 0.01):
            await service.start_auto_sync()
            await asyncio.sleep(0.1)
            await service.stop_auto_sync()

        calls_after_stop = scoreboard.live_calls
        self.assertGreaterEqual(calls_after_stop, 2)
        await asyncio.sleep(0.05)
        self.assertEqual(calls_after_stop, scoreboard.live_calls)

    async def test_interval_is_clamped(self) -> None:
        service = BannerSyncService(FakeScoreboard(), _store(), interval_minutes=500)
        self.assertEqual(60, service.interval_minutes)

        await service.start_auto_sync(0)
        self.assertEqual(1, service.interval_minutes)
        await service.stop_auto_sync()

    async def test_stop_without_start(self) -> None:
        service = BannerSyncService(FakeScoreboard(), _store())

        await service.stop_auto_sync()

        self.assertFalse(service.get_sync_status().is_running)


class ManualSyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_perform_sync_without_live_games(self) -> None:
        store = _store()
        service = BannerSyncService(FakeScoreboard(), store)

        with self.assertLogs("banner_sync.scheduler", level="INFO") as logs:
            result = await service.perform_sync()

        self.assertEqual(0, result.total_games)
        self.assertEqual([], store.list_all_banners())
        self.assertTrue(any("No live games found" in line for line in logs.output))
        self.assertIsNotNone(service.get_sync_status().last_sync_at)

    async def test_perform_sync_creates_then_updates_active_banner(self) -> None:
        store = _store()
        scoreboard = FakeScoreboard(live=[_game("401", home_score=10)])
        service = BannerSyncService(scoreboard, store)

        first = await service.perform_sync()
        scoreboard.live = [_game("401", home_score=12)]
        second = await service.perform_sync()

        self.assertEqual(1, first.created)
        self.assertEqual(1, second.updated)
        banners = store.list_all_banners()
        self.assertEqual(1, len(banners))
        self.assertEqual(12, banners[0].home_score)
        self.assertTrue(banners[0].is_enabled)

    async def test_scoreboard_failure_is_counted(self) -> None:
        service = BannerSyncService(FakeScoreboard(fail_live=True), _store())

        with self.assertLogs("banner_sync.scheduler", level="ERROR"):
            result = await service.perform_sync()

        self.assertEqual(1, result.errors)

    async def test_concurrent_cycles_do_not_overlap(self) -> None:
        scoreboard = FakeScoreboard(live=[_game("401")])
        store = _store()
        service = BannerSyncService(scoreboard, store)

        await asyncio.gather(service.perform_sync(), service.perform_sync())

        self.assertEqual(1, scoreboard.max_active)
        self.assertEqual(1, len(store.list_all_banners()))

    async def test_upcoming_and_cleanup(self) -> None:
        store = _store()
        scoreboard = FakeScoreboard(upcoming=[_game("501", status="scheduled"), _game("502", status="scheduled")])
        service = BannerSyncService(scoreboard, store)

        upcoming = await service.sync_upcoming_games()
        cleanup = await service.cleanup_old_banners()

        self.assertEqual(2, upcoming.created)
        self.assertEqual(0, cleanup.deleted)
        self.assertEqual(2, len(store.list_all_banners()))

    async def test_sync_specific_game(self) -> None:
        store = _store()
        service = BannerSyncService(FakeScoreboard(live=[_game("401"), _game("402")]), store)

        result = await service.sync_specific_game("basketball", "402")

        self.assertEqual(1, result.created)
        self.assertEqual("402", store.list_all_banners()[0].game_id)

    async def test_sync_specific_game_errors(self) -> None:
        service = BannerSyncService(FakeScoreboard(live=[_game("401")]), _store())

        with self.assertRaises(GameNotFoundError):
            await service.sync_specific_game("basketball", "999")
        with self.assertRaises(UnknownSportError):
            await service.sync_specific_game("curling", "401")


class BuildStoreTests(unittest.TestCase):
    def test_unknown_backend_is_rejected(self) -> None:
        with patch.dict("os.environ", {"BANNER_STORE": "redis"}):
            settings = load_settings()

        with self.assertRaises(ValueError):
            build_store(settings)

    def test_sql_backend(self) -> None:
        with patch.dict(
            "os.environ",
            {"BANNER_STORE": "sql", "DATABASE_URL": "sqlite:///:memory:"},
        ):
            settings = load_settings()

        self.assertIsInstance(build_store(settings), SqlBannerStore)


if __name__ == "__main__":
    unittest.main()
