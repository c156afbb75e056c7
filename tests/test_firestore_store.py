from __future__ import annotations

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from google.api_core.exceptions import NotFound
from google.cloud import firestore

from banner_sync.ingestion.reconcile import BannerReconciler, find_active_banner
from banner_sync.schemas import Game
from banner_sync.storage.base import BannerNotFoundError
from banner_sync.storage.firestore_store import FirestoreBannerStore


LIVE_GAME = Game(
    id="401",
    sport="basketball",
    source="espn",
    home_team_id="ucsd",
    away_team_id="ucla",
    home_score=71,
    away_score=65,
    game_status="live",
    date=datetime(2026, 2, 10, 3, 0, tzinfo=timezone.utc),
)


def _doc(doc_id: str, data: dict) -> MagicMock:
    doc = MagicMock()
    doc.id = doc_id
    doc.to_dict.return_value = data
    return doc


class FirestoreBannerStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = MagicMock()
        self.collection = self.client.collection.return_value
        self.store = FirestoreBannerStore(self.client, "sport-banners")

    def test_list_skips_malformed_documents(self) -> None:
        self.collection.order_by.return_value.stream.return_value = [
            _doc("a", {"gameId": "401", "homeScore": 71, "isEnabled": True, "gameStatus": "halftime"}),
            _doc("b", {"homeScore": "not-a-score"}),
        ]

        with self.assertLogs("banner_sync.storage.firestore_store", level="WARNING"):
            banners = self.store.list_all_banners()

        self.client.collection.assert_called_with("sport-banners")
        self.collection.order_by.assert_called_once_with(
            "date", direction=firestore.Query.DESCENDING
        )
        self.assertEqual(["a"], [banner.id for banner in banners])
        self.assertEqual(71, banners[0].home_score)
        self.assertEqual("halftime", banners[0].game_status)

    def test_malformed_enabled_document_still_holds_the_live_slot(self) -> None:
        self.collection.order_by.return_value.stream.return_value = [
            _doc("old", {"gameId": "300", "isEnabled": False, "gameStatus": "final"}),
            _doc("live", {"gameId": "401", "isEnabled": True, "homeScore": "garbled"}),
        ]

        with self.assertLogs("banner_sync.storage.firestore_store", level="WARNING"):
            banners = self.store.list_all_banners()
        result = BannerReconciler(self.store).reconcile_live([LIVE_GAME], banners)

        self.assertEqual(["old", "live"], [banner.id for banner in banners])
        self.assertEqual("live", find_active_banner(banners).id)
        self.assertEqual(1, result.updated)
        self.assertEqual(0, result.created)
        self.collection.document.assert_called_with("live")
        update = self.collection.document.return_value.update.call_args.args[0]
        self.assertEqual(71, update["homeScore"])
        self.collection.document.return_value.set.assert_not_called()

    def test_create_stamps_actor_and_server_time(self) -> None:
        doc_ref = self.collection.document.return_value
        doc_ref.id = "new-doc"

        banner_id = self.store.create_banner({"gameId": "401", "isEnabled": True})

        self.assertEqual("new-doc", banner_id)
        written = doc_ref.set.call_args.args[0]
        self.assertEqual("401", written["gameId"])
        self.assertEqual("sync", written["createdBy"])
        self.assertIs(firestore.SERVER_TIMESTAMP, written["lastUpdated"])

    def test_update_missing_document(self) -> None:
        self.collection.document.return_value.update.side_effect = NotFound("no document")

        with self.assertRaises(BannerNotFoundError):
            self.store.update_banner("gone", {"homeScore": 1})

    def test_update_and_delete_target_the_document(self) -> None:
        self.store.update_banner("a", {"homeScore": 2})
        self.store.delete_banner("a")

        self.collection.document.assert_called_with("a")
        update = self.collection.document.return_value.update.call_args.args[0]
        self.assertEqual(2, update["homeScore"])
        self.assertEqual("sync", update["updatedBy"])
        self.collection.document.return_value.delete.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
