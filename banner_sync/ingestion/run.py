"""CLI entrypoint for one-shot and scheduled banner sync runs."""

from __future__ import annotations

import argparse
import asyncio
import logging

from banner_sync.ingestion.base import ProviderFetchError
from banner_sync.ingestion.reconcile import SyncResult
from banner_sync.ingestion.sports import UnknownSportError, get_all_available_sports, parse_sport
from banner_sync.scheduler import BannerSyncService, build_sync_service
from banner_sync.settings import load_settings

MODES = ("live", "upcoming", "cleanup", "sport")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run one banner sync pass against the configured banner store.",
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=MODES,
        default="live",
        help="live: update the active banner, upcoming: create banners for scheduled games, "
        "cleanup: delete expired final banners, sport: list tracked games for one sport.",
    )
    parser.add_argument(
        "--sport",
        type=str,
        help="Sport key for --mode sport (e.g., basketball, football).",
    )
    return parser.parse_args()


def _require_sport(raw: str | None) -> str:
    if not raw:
        raise SystemExit("--sport is required with --mode sport")
    try:
        return parse_sport(raw).value
    except UnknownSportError:
        supported = ", ".join(get_all_available_sports())
        raise SystemExit(f"Unsupported sport: {raw}. Supported: {supported}") from None


async def _run(service: BannerSyncService, mode: str, sport: str | None) -> SyncResult | None:
    if mode == "live":
        return await service.perform_sync()
    if mode == "upcoming":
        return await service.sync_upcoming_games()
    if mode == "cleanup":
        return await service.cleanup_old_banners()

    games = await service.scoreboard.get_games_for_sport(sport)
    for game in games:
        logging.info(
            "%s %s vs %s %s-%s status=%s period=%s",
            game.id,
            game.home_team_id,
            game.away_team_id,
            game.home_score,
            game.away_score,
            game.game_status,
            game.period or "-",
        )
    logging.info("Found %s tracked %s games", len(games), sport)
    return None


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args()
    sport = _require_sport(args.sport) if args.mode == "sport" else None
    settings = load_settings()
    service = build_sync_service(settings)

    logging.info("Starting banner sync mode=%s store=%s", args.mode, settings.banner_store)
    try:
        result = asyncio.run(_run(service, args.mode, sport))
    except ProviderFetchError as exc:
        logging.error("%s error: %s", exc.provider.value.upper(), exc.detail)
        raise SystemExit(1) from None
    if result is None:
        return
    logging.info(
        "Done: games=%s created=%s updated=%s deleted=%s errors=%s",
        result.total_games,
        result.created,
        result.updated,
        result.deleted,
        result.errors,
    )
    if result.errors:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
