from __future__ import annotations

import logging
import os
import time
from typing import Any

import requests

from banner_sync.ingestion.sports import NCAA_SPORTS, Sport, UnknownSportError, parse_sport

logger = logging.getLogger(__name__)

NCAA_BASE_URL = os.getenv("NCAA_BASE_URL", "https://ncaa-api.henrygd.me").rstrip("/")
NCAA_TIMEOUT_SECONDS = 10
NCAA_MAX_ATTEMPTS = 2
MAX_ERROR_SNIPPET = 300
DIVISIONS = ("d1", "d2", "d3", "fbs", "fcs", "nc")


class NCAAClientError(RuntimeError):
    pass


def _truncate(value: str, limit: int = MAX_ERROR_SNIPPET) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "...<truncated>"


def _sport_segment(sport: str | Sport) -> str:
    parsed = parse_sport(sport)
    if parsed not in NCAA_SPORTS:
        raise UnknownSportError(parsed.value)
    return parsed.value


def _division_segment(division: str) -> str:
    cleaned = division.strip().lower()
    if cleaned not in DIVISIONS:
        raise ValueError(f"Invalid division: {division}")
    return cleaned


def build_scoreboard_url(
    sport: str | Sport,
    division: str = "d1",
    base_url: str | None = None,
) -> str:
    root = (base_url or NCAA_BASE_URL).rstrip("/")
    return f"{root}/scoreboard/{_sport_segment(sport)}/{_division_segment(division)}"


def _get_json(url: str, timeout: float) -> dict[str, Any]:
    response = None
    last_exception: requests.RequestException | None = None
    for attempt in range(1, NCAA_MAX_ATTEMPTS + 1):
        try:
            response = requests.get(
                url,
                headers={"Accept": "application/json"},
                timeout=timeout,
            )
            break
        except requests.Timeout as exc:
            last_exception = exc
            if attempt == NCAA_MAX_ATTEMPTS:
                break
            time.sleep(attempt * 0.5)
        except requests.RequestException as exc:
            raise NCAAClientError(f"NCAA request failed: {exc}") from exc

    if response is None:
        raise NCAAClientError(
            f"NCAA request timed out after {NCAA_MAX_ATTEMPTS} attempts: {last_exception}"
        ) from last_exception

    if response.status_code >= 400:
        raise NCAAClientError(
            f"NCAA API error {response.status_code}: {_truncate(response.text)}"
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise NCAAClientError(
            "NCAA API returned non-JSON response: " + _truncate(response.text)
        ) from exc
    if not isinstance(payload, dict):
        raise NCAAClientError("NCAA API returned a non-object payload")
    return payload


def fetch_scoreboard(
    sport: str | Sport,
    division: str = "d1",
    *,
    base_url: str | None = None,
    timeout: float = NCAA_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """Fetch the NCAA scoreboard for a sport/division.

    Raises NCAAClientError on transport, status or JSON failures.
    """

    url = build_scoreboard_url(sport, division, base_url=base_url)
    logger.debug("Fetching NCAA scoreboard url=%s", url)
    return _get_json(url, timeout)


def fetch_rankings(
    sport: str | Sport,
    division: str = "d1",
    poll: str = "associated-press",
    *,
    base_url: str | None = None,
    timeout: float = NCAA_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    root = (base_url or NCAA_BASE_URL).rstrip("/")
    url = f"{root}/rankings/{_sport_segment(sport)}/{_division_segment(division)}/{poll}"
    logger.debug("Fetching NCAA rankings url=%s", url)
    return _get_json(url, timeout)
