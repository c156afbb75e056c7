"""Quick probe for scoreboard provider availability."""

from __future__ import annotations

import argparse
import asyncio
import logging

from banner_sync.ingestion.base import ProviderFetchError
from banner_sync.ingestion.sports import UnknownSportError, classify, get_all_available_sports
from banner_sync.scheduler import build_scoreboard
from banner_sync.settings import load_settings


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Probe both scoreboard providers, or the provider for one sport.",
    )
    parser.add_argument(
        "--sport",
        type=str,
        help="Sport key to fetch (e.g., basketball, volleyball). Default: connectivity check.",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = _parse_args()
    scoreboard = build_scoreboard(load_settings())

    if not args.sport:
        report = asyncio.run(scoreboard.test_connectivity())
        for line in report.details:
            logging.info(line)
        if not (report.espn and report.ncaa):
            raise SystemExit(1)
        return

    try:
        provider = classify(args.sport)
        games = asyncio.run(scoreboard.get_games_for_sport(args.sport))
    except UnknownSportError:
        supported = ", ".join(get_all_available_sports())
        raise SystemExit(f"Unsupported sport: {args.sport}. Supported: {supported}") from None
    except ProviderFetchError as exc:
        logging.error("%s error: %s", exc.provider.value.upper(), exc.detail)
        raise SystemExit(1) from None

    logging.info(
        "Fetched %s tracked games for sport=%s provider=%s",
        len(games),
        args.sport,
        provider.value,
    )


if __name__ == "__main__":
    main()
