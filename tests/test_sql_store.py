from __future__ import annotations

import unittest
from datetime import datetime, timezone

from banner_sync.db import make_session_factory
from banner_sync.storage.base import BannerNotFoundError
from banner_sync.storage.sql_store import SqlBannerStore


def _fields(game_id: str, day: int, **overrides) -> dict:
    fields = {
        "gameId": game_id,
        "source": "ncaa",
        "sport": "volleyball",
        "homeTeamId": "ucsd",
        "awayTeamId": "ucla",
        "homeScore": 1,
        "awayScore": 2,
        "gameStatus": "live",
        "gameTime": "7:00 PM",
        "venue": "TBD",
        "period": "3",
        "timeRemaining": "",
        "date": datetime(2026, 10, day, 2, 0, tzinfo=timezone.utc),
        "isEnabled": True,
        "substitutions": [],
        "highlights": [],
    }
    fields.update(overrides)
    return fields


class SqlBannerStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = SqlBannerStore(make_session_factory("sqlite:///:memory:"))

    def test_create_and_list_round_trip(self) -> None:
        banner_id = self.store.create_banner(
            _fields("63", 3, highlights=[{"minute": 12, "text": "Kill by #7"}])
        )

        banners = self.store.list_all_banners()

        self.assertEqual(1, len(banners))
        banner = banners[0]
        self.assertEqual(banner_id, banner.id)
        self.assertEqual("63", banner.game_id)
        self.assertEqual("ncaa", banner.source)
        self.assertEqual(2, banner.away_score)
        self.assertTrue(banner.is_enabled)
        self.assertEqual(datetime(2026, 10, 3, 2, 0, tzinfo=timezone.utc), banner.date)
        self.assertEqual([{"minute": 12, "text": "Kill by #7"}], banner.highlights)
        self.assertEqual("sync", banner.created_by)

    def test_list_orders_by_date_descending(self) -> None:
        self.store.create_banner(_fields("older", 1))
        self.store.create_banner(_fields("newer", 5))

        self.assertEqual(["newer", "older"], [b.game_id for b in self.store.list_all_banners()])

    def test_update_changes_only_given_fields(self) -> None:
        banner_id = self.store.create_banner(_fields("63", 3))

        self.store.update_banner(banner_id, {"homeScore": 3, "gameStatus": "final"})

        banner = self.store.list_all_banners()[0]
        self.assertEqual(3, banner.home_score)
        self.assertEqual(2, banner.away_score)
        self.assertEqual("final", banner.game_status)

    def test_update_missing_banner(self) -> None:
        with self.assertRaises(BannerNotFoundError):
            self.store.update_banner("999", {"homeScore": 1})
        with self.assertRaises(BannerNotFoundError):
            self.store.update_banner("not-a-number", {"homeScore": 1})

    def test_delete(self) -> None:
        banner_id = self.store.create_banner(_fields("63", 3))

        self.store.delete_banner(banner_id)

        self.assertEqual([], self.store.list_all_banners())
        with self.assertRaises(BannerNotFoundError):
            self.store.delete_banner(banner_id)


if __name__ == "__main__":
    unittest.main()
