from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from banner_sync.ingestion.base import ProviderFetchError
from banner_sync.ingestion.ncaa_client import NCAAClientError, fetch_rankings
from banner_sync.ingestion.sports import (
    UnknownSportError,
    get_all_available_sports,
    get_espn_sports,
    get_ncaa_sports,
)
from banner_sync.log_buffer import install_buffer_handler, remove_buffer_handler
from banner_sync.scheduler import BannerSyncService, GameNotFoundError, build_sync_service
from banner_sync.schemas import (
    BannerPatch,
    BannerRecord,
    ConnectivityReport,
    Game,
    ScoreboardOverview,
    SyncResultOut,
    SyncStatus,
)
from banner_sync.settings import SyncSettings, load_settings
from banner_sync.storage.base import BannerNotFoundError

logger = logging.getLogger(__name__)


def _service(request: Request) -> BannerSyncService:
    service = getattr(request.app.state, "sync_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Sync service not initialized")
    return service


def create_app(
    settings: Optional[SyncSettings] = None,
    service: Optional[BannerSyncService] = None,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Sports Banner Sync")
    app.state.sync_service = service
    app.state.log_handler = None

    @app.on_event("startup")
    async def start_sync_service() -> None:
        app.state.log_handler = install_buffer_handler()
        if app.state.sync_service is None:
            app.state.sync_service = build_sync_service(settings)
        logger.info("App starting up - store=%s auto_sync=%s", settings.banner_store, settings.auto_sync_enabled)
        if settings.auto_sync_enabled:
            await app.state.sync_service.start_auto_sync(settings.auto_sync_interval_minutes)

    @app.on_event("shutdown")
    async def stop_sync_service() -> None:
        if app.state.sync_service is not None:
            await app.state.sync_service.stop_auto_sync()
        if app.state.log_handler is not None:
            remove_buffer_handler(app.state.log_handler)
            app.state.log_handler = None

    @app.get("/api/sync/status", response_model=SyncStatus)
    def sync_status(request: Request):
        return _service(request).get_sync_status()

    @app.post("/api/sync/start", response_model=SyncStatus)
    async def sync_start(request: Request, interval_minutes: Optional[int] = None):
        service = _service(request)
        await service.start_auto_sync(interval_minutes)
        return service.get_sync_status()

    @app.post("/api/sync/stop", response_model=SyncStatus)
    async def sync_stop(request: Request):
        service = _service(request)
        await service.stop_auto_sync()
        return service.get_sync_status()

    @app.post("/api/sync/run", response_model=SyncResultOut)
    async def sync_run(request: Request):
        result = await _service(request).perform_sync()
        return SyncResultOut.model_validate(result)

    @app.post("/api/sync/upcoming", response_model=SyncResultOut)
    async def sync_upcoming(request: Request):
        result = await _service(request).sync_upcoming_games()
        return SyncResultOut.model_validate(result)

    @app.post("/api/sync/cleanup", response_model=SyncResultOut)
    async def sync_cleanup(request: Request):
        result = await _service(request).cleanup_old_banners()
        return SyncResultOut.model_validate(result)

    @app.post("/api/sync/games/{sport}/{game_id}", response_model=SyncResultOut)
    async def sync_game(request: Request, sport: str, game_id: str):
        try:
            result = await _service(request).sync_specific_game(sport, game_id)
        except UnknownSportError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except GameNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ProviderFetchError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return SyncResultOut.model_validate(result)

    @app.get("/api/sports")
    def sports_all():
        return {"sports": get_all_available_sports()}

    @app.get("/api/sports/espn")
    def sports_espn():
        return {"sports": get_espn_sports()}

    @app.get("/api/sports/ncaa")
    def sports_ncaa():
        return {"sports": get_ncaa_sports()}

    @app.get("/api/sports/{sport}/games", response_model=list[Game])
    async def sport_games(request: Request, sport: str):
        try:
            return await _service(request).scoreboard.get_games_for_sport(sport)
        except UnknownSportError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ProviderFetchError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    @app.get("/api/ncaa/rankings/{sport}")
    async def ncaa_rankings(sport: str, division: str = "d1", poll: str = "associated-press"):
        try:
            return await asyncio.to_thread(
                fetch_rankings,
                sport,
                division,
                poll,
                base_url=settings.ncaa_base_url,
                timeout=settings.provider_timeout_seconds,
            )
        except UnknownSportError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except NCAAClientError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    @app.get("/api/connectivity", response_model=ConnectivityReport)
    async def connectivity(request: Request):
        return await _service(request).scoreboard.test_connectivity()

    @app.get("/api/overview", response_model=ScoreboardOverview)
    async def overview(request: Request):
        return await _service(request).scoreboard.get_overview()

    @app.get("/api/banners", response_model=list[BannerRecord])
    async def list_banners(request: Request):
        return await asyncio.to_thread(_service(request).store.list_all_banners)

    @app.patch("/api/banners/{banner_id}", response_model=BannerRecord)
    async def patch_banner(request: Request, banner_id: str, patch: BannerPatch):
        store = _service(request).store
        fields = patch.model_dump(by_alias=True, exclude_none=True)
        if not fields:
            raise HTTPException(status_code=400, detail="No banner fields to update")
        try:
            await asyncio.to_thread(store.update_banner, banner_id, fields)
            banners = await asyncio.to_thread(store.list_all_banners)
            if patch.is_enabled:
                # Keep a single enabled banner when an operator switches the live slot.
                for banner in banners:
                    if banner.id != banner_id and banner.is_enabled:
                        await asyncio.to_thread(store.update_banner, banner.id, {"isEnabled": False})
                banners = await asyncio.to_thread(store.list_all_banners)
        except BannerNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Banner not found") from exc
        logger.info("Operator updated banner id=%s fields=%s", banner_id, sorted(fields))
        for banner in banners:
            if banner.id == banner_id:
                return banner
        raise HTTPException(status_code=404, detail="Banner not found")

    @app.get("/api/logs")
    def api_logs(limit: int = 100):
        handler = app.state.log_handler
        if handler is None:
            return {"entries": []}
        return {"entries": handler.entries(limit=limit)}

    @app.get("/metrics")
    def prometheus_metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
