"""Timer-driven banner sync plus the manual one-shot triggers."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from banner_sync import metrics
from banner_sync.db import make_session_factory
from banner_sync.ingestion.espn_adapter import ESPNAdapter
from banner_sync.ingestion.ncaa_adapter import NCAAAdapter
from banner_sync.ingestion.reconcile import BannerReconciler, SyncResult
from banner_sync.ingestion.sports import Provider, Sport
from banner_sync.ingestion.unified import UnifiedScoreboard
from banner_sync.schemas import SyncStatus
from banner_sync.settings import SyncSettings, clamp_interval
from banner_sync.storage.base import BannerStore
from banner_sync.storage.firestore_store import FirestoreBannerStore, get_firestore_client
from banner_sync.storage.sql_store import SqlBannerStore

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60


class GameNotFoundError(LookupError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _log_result(label: str, result: SyncResult) -> None:
    logger.info(
        "%s done: games=%s created=%s updated=%s deleted=%s errors=%s",
        label,
        result.total_games,
        result.created,
        result.updated,
        result.deleted,
        result.errors,
    )


class BannerSyncService:
    """Owns the auto-sync state; one instance per hosting process."""

    def __init__(
        self,
        scoreboard: UnifiedScoreboard,
        store: BannerStore,
        *,
        interval_minutes: int = 2,
    ) -> None:
        self.scoreboard = scoreboard
        self.store = store
        self.reconciler = BannerReconciler(store)
        self.interval_minutes = clamp_interval(interval_minutes)
        self.is_running = False
        self.last_sync_at: datetime | None = None
        self._task: asyncio.Task | None = None
        self._stop: asyncio.Event | None = None
        # Serializes cycles that write banners so the active slot is read and written atomically.
        self._cycle_lock = asyncio.Lock()

    async def start_auto_sync(self, interval_minutes: int | None = None) -> None:
        if self.is_running:
            logger.info("Auto-sync already running (interval=%s minutes)", self.interval_minutes)
            return

        if interval_minutes is not None:
            self.interval_minutes = clamp_interval(interval_minutes)
        self.is_running = True
        metrics.set_sync_running(True)
        stop = asyncio.Event()
        self._stop = stop
        logger.info("Starting auto-sync every %s minutes", self.interval_minutes)

        await self.perform_sync()
        if stop.is_set():
            return
        self._task = asyncio.create_task(self._auto_sync_loop(stop))

    async def _auto_sync_loop(self, stop: asyncio.Event) -> None:
        while not stop.is_set():
            try:
                await asyncio.wait_for(
                    stop.wait(),
                    timeout=self.interval_minutes * SECONDS_PER_MINUTE,
                )
            except asyncio.TimeoutError:
                pass
            else:
                break
            try:
                await self.perform_sync()
            except Exception:
                logger.exception("Auto-sync cycle failed.")
        logger.info("Auto-sync loop exited.")

    async def stop_auto_sync(self) -> None:
        """Stop arming new cycles; an in-flight cycle runs to completion."""
        if self._stop:
            self._stop.set()
        self.is_running = False
        metrics.set_sync_running(False)
        task = self._task
        self._task = None
        self._stop = None
        if task:
            await task
        logger.info("Auto-sync stopped")

    async def perform_sync(self) -> SyncResult:
        async with self._cycle_lock:
            result = SyncResult()
            try:
                games = await self.scoreboard.get_live_games()
                if not games:
                    logger.info("No live games found")
                else:
                    banners = await asyncio.to_thread(self.store.list_all_banners)
                    result = await asyncio.to_thread(
                        self.reconciler.reconcile_live, games, banners
                    )
            except Exception:
                result.errors += 1
                logger.exception("Live sync failed.")
            self.last_sync_at = _utcnow()
        _log_result("Live sync", result)
        return result

    async def sync_upcoming_games(self) -> SyncResult:
        async with self._cycle_lock:
            result = SyncResult()
            try:
                games = await self.scoreboard.get_upcoming_games()
                result = await asyncio.to_thread(self.reconciler.create_upcoming, games)
            except Exception:
                result.errors += 1
                logger.exception("Upcoming sync failed.")
            self.last_sync_at = _utcnow()
        _log_result("Upcoming sync", result)
        return result

    async def cleanup_old_banners(self) -> SyncResult:
        async with self._cycle_lock:
            result = SyncResult()
            try:
                banners = await asyncio.to_thread(self.store.list_all_banners)
                result = await asyncio.to_thread(self.reconciler.cleanup, banners)
            except Exception:
                result.errors += 1
                logger.exception("Banner cleanup failed.")
        _log_result("Banner cleanup", result)
        return result

    async def sync_specific_game(self, sport: str | Sport, game_id: str) -> SyncResult:
        """Push one game into the active banner slot.

        Raises UnknownSportError, ProviderFetchError or GameNotFoundError.
        """

        games = await self.scoreboard.get_games_for_sport(sport)
        game = next((candidate for candidate in games if candidate.id == game_id), None)
        if game is None:
            raise GameNotFoundError(f"Game {game_id} not found for sport={sport}")

        async with self._cycle_lock:
            banners = await asyncio.to_thread(self.store.list_all_banners)
            result = await asyncio.to_thread(self.reconciler.sync_single, game, banners)
            self.last_sync_at = _utcnow()
        _log_result("Specific game sync", result)
        return result

    def get_sync_status(self) -> SyncStatus:
        return SyncStatus(
            is_running=self.is_running,
            last_sync_at=self.last_sync_at,
            interval_minutes=self.interval_minutes,
        )


def build_store(settings: SyncSettings) -> BannerStore:
    if settings.banner_store == "firestore":
        client = get_firestore_client(settings.gcp_project_id, settings.firestore_database_name)
        return FirestoreBannerStore(client, settings.banners_collection)
    if settings.banner_store != "sql":
        raise ValueError(f"Unsupported BANNER_STORE: {settings.banner_store}")
    return SqlBannerStore(make_session_factory(settings.database_url))


def build_scoreboard(settings: SyncSettings) -> UnifiedScoreboard:
    common = {
        "tracked_team_id": settings.tracked_team_id,
        "tracked_aliases": settings.tracked_team_aliases,
        "timeout": settings.provider_timeout_seconds,
    }
    return UnifiedScoreboard(
        {
            Provider.ESPN: ESPNAdapter(base_url=settings.espn_base_url, **common),
            Provider.NCAA: NCAAAdapter(
                base_url=settings.ncaa_base_url,
                division=settings.ncaa_division,
                **common,
            ),
        }
    )


def build_sync_service(settings: SyncSettings, store: BannerStore | None = None) -> BannerSyncService:
    return BannerSyncService(
        build_scoreboard(settings),
        store if store is not None else build_store(settings),
        interval_minutes=settings.auto_sync_interval_minutes,
    )
