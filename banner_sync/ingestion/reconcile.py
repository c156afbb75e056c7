"""Apply freshly fetched games to the persisted banner records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence

from banner_sync import metrics
from banner_sync.schemas import BannerRecord, Game
from banner_sync.storage.base import BannerStore

logger = logging.getLogger(__name__)

RETENTION_WINDOW = timedelta(hours=24)


@dataclass
class SyncResult:
    total_games: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: int = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def find_active_banner(banners: Sequence[BannerRecord]) -> BannerRecord | None:
    """First enabled banner in list order, even when storage holds several."""
    for banner in banners:
        if banner.is_enabled:
            return banner
    return None


def is_expired(banner: BannerRecord, now: datetime, retention: timedelta = RETENTION_WINDOW) -> bool:
    if banner.game_status != "final" or banner.date is None:
        return False
    return _ensure_utc(banner.date) < now - retention


def _new_banner_fields(game: Game) -> dict:
    fields = game.banner_fields()
    fields["substitutions"] = []
    fields["highlights"] = []
    return fields


class BannerReconciler:
    def __init__(self, store: BannerStore) -> None:
        self.store = store

    def _create(self, game: Game, result: SyncResult) -> str | None:
        try:
            banner_id = self.store.create_banner(_new_banner_fields(game))
        except Exception:
            result.errors += 1
            metrics.record_write_failure("create")
            logger.exception(
                "Failed creating banner source=%s game_id=%s", game.source, game.id
            )
            return None
        result.created += 1
        metrics.record_write("create")
        logger.info(
            "Created banner id=%s for %s game source=%s game_id=%s",
            banner_id,
            game.sport,
            game.source,
            game.id,
        )
        return banner_id

    def _update(self, banner_id: str, game: Game, result: SyncResult, now: datetime) -> bool:
        fields = game.banner_fields()
        fields["lastUpdated"] = now
        try:
            self.store.update_banner(banner_id, fields)
        except Exception:
            result.errors += 1
            metrics.record_write_failure("update")
            logger.exception(
                "Failed updating banner id=%s source=%s game_id=%s",
                banner_id,
                game.source,
                game.id,
            )
            return False
        result.updated += 1
        metrics.record_write("update")
        logger.info(
            "Updated banner id=%s for %s game source=%s game_id=%s score=%s-%s status=%s",
            banner_id,
            game.sport,
            game.source,
            game.id,
            game.home_score,
            game.away_score,
            game.game_status,
        )
        return True

    def reconcile_live(
        self,
        games: Iterable[Game],
        banners: Sequence[BannerRecord],
        *,
        now: datetime | None = None,
    ) -> SyncResult:
        """Write live games into the single active banner slot.

        The active banner is updated in place for every game, so when several
        games are live the last one processed wins the slot.
        """

        result = SyncResult()
        now_utc = now or _utcnow()
        active = find_active_banner(banners)
        active_id = active.id if active else None
        if sum(1 for banner in banners if banner.is_enabled) > 1:
            logger.warning("Multiple enabled banners found; using id=%s", active_id)

        for game in games:
            result.total_games += 1
            if active_id is not None:
                self._update(active_id, game, result, now_utc)
                continue
            created_id = self._create(game, result)
            if created_id is not None and game.is_enabled:
                active_id = created_id
        return result

    def sync_single(
        self,
        game: Game,
        banners: Sequence[BannerRecord],
        *,
        now: datetime | None = None,
    ) -> SyncResult:
        return self.reconcile_live([game], banners, now=now)

    def create_upcoming(self, games: Iterable[Game]) -> SyncResult:
        """Create a banner for every upcoming game without touching the active slot."""
        result = SyncResult()
        for game in games:
            result.total_games += 1
            self._create(game, result)
        return result

    def cleanup(
        self,
        banners: Iterable[BannerRecord],
        *,
        now: datetime | None = None,
        retention: timedelta = RETENTION_WINDOW,
    ) -> SyncResult:
        result = SyncResult()
        now_utc = now or _utcnow()
        for banner in banners:
            if not is_expired(banner, now_utc, retention):
                continue
            try:
                self.store.delete_banner(banner.id)
            except Exception:
                result.errors += 1
                metrics.record_write_failure("delete")
                logger.exception("Failed deleting banner id=%s", banner.id)
                continue
            result.deleted += 1
            metrics.record_write("delete")
            logger.info("Deleted old banner id=%s", banner.id)
        return result
