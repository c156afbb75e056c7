"""ESPN HTTP client for fetching college scoreboards."""

from __future__ import annotations

import json
import logging
import os
import time
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from banner_sync.ingestion.sports import ESPN_LEAGUE_PATHS, Sport, UnknownSportError, parse_sport

logger = logging.getLogger(__name__)
ESPN_BASE_URL = os.getenv("ESPN_BASE_URL", "https://site.api.espn.com").rstrip("/")
SCOREBOARD_BASE_PATH = "/apis/site/v2/sports"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 0.5
DEFAULT_USER_AGENT = "banner-sync/1.0 (+https://example.local)"


def build_scoreboard_url(sport: str | Sport, base_url: str | None = None) -> str:
    league_path = ESPN_LEAGUE_PATHS.get(parse_sport(sport))
    if league_path is None:
        raise UnknownSportError(sport.value if isinstance(sport, Sport) else str(sport))

    root = (base_url or ESPN_BASE_URL).rstrip("/")
    return f"{root}{SCOREBOARD_BASE_PATH}/{league_path}/scoreboard"


def fetch_scoreboard(
    sport: str | Sport,
    *,
    base_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict:
    """Fetch ESPN scoreboard data for today's games in a sport.

    Returns parsed JSON on success. On failure, returns a controlled error dict.
    """

    sport_key = sport.value if isinstance(sport, Sport) else str(sport)
    try:
        url = build_scoreboard_url(sport, base_url)
    except ValueError as exc:
        return {
            "ok": False,
            "error": str(exc),
            "sport": sport_key,
        }

    headers = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json",
    }

    last_error: str | None = None
    last_status: int | None = None
    last_body_snippet: str | None = None
    for attempt in range(DEFAULT_RETRIES):
        try:
            request = Request(url, headers=headers)
            with urlopen(request, timeout=timeout) as response:
                status = getattr(response, "status", None)
                payload = response.read().decode("utf-8")
                if status and status != 200:
                    body_snippet = payload[:300]
                    logger.error(
                        "ESPN scoreboard non-200 status=%s body=%s",
                        status,
                        body_snippet,
                    )
                    return {
                        "ok": False,
                        "error": "ESPN returned non-200 response",
                        "status": status,
                        "body": body_snippet,
                        "sport": sport_key,
                        "url": url,
                    }
                data = json.loads(payload)
                if not isinstance(data, dict):
                    return {
                        "ok": False,
                        "error": "ESPN returned a non-object payload",
                        "sport": sport_key,
                        "url": url,
                    }
                return data
        except HTTPError as exc:
            last_status = exc.code
            body = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
            last_body_snippet = body[:300]
            logger.error(
                "ESPN scoreboard HTTPError status=%s body=%s",
                last_status,
                last_body_snippet,
            )
            last_error = str(exc)
            if attempt < DEFAULT_RETRIES - 1:
                time.sleep(DEFAULT_BACKOFF_SECONDS * (2**attempt))
        except (OSError, ValueError) as exc:
            # OSError covers URLError, timeouts and resets; ValueError covers decode and JSON errors.
            logger.warning("ESPN scoreboard read failed attempt=%s error=%s", attempt + 1, exc)
            last_error = str(exc)
            if attempt < DEFAULT_RETRIES - 1:
                time.sleep(DEFAULT_BACKOFF_SECONDS * (2**attempt))

    return {
        "ok": False,
        "error": "Failed to fetch ESPN scoreboard",
        "details": last_error,
        "status": last_status,
        "body": last_body_snippet,
        "sport": sport_key,
        "url": url,
    }
