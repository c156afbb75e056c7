from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MIN_INTERVAL_MINUTES = 1
MAX_INTERVAL_MINUTES = 60
DEFAULT_TRACKED_TEAM_ALIASES = ("uc san diego", "ucsd", "tritons")


@dataclass(frozen=True)
class SyncSettings:
    banner_store: str
    database_url: str
    gcp_project_id: str | None
    firestore_database_name: str | None
    banners_collection: str
    auto_sync_enabled: bool
    auto_sync_interval_minutes: int
    espn_base_url: str
    ncaa_base_url: str
    ncaa_division: str
    provider_timeout_seconds: float
    tracked_team_id: str
    tracked_team_aliases: tuple[str, ...]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s=%r, using %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid number for %s=%r, using %s", name, raw, default)
        return default


def _parse_aliases(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_TRACKED_TEAM_ALIASES
    aliases = tuple(alias.strip().lower() for alias in raw.split(",") if alias.strip())
    return aliases or DEFAULT_TRACKED_TEAM_ALIASES


def clamp_interval(interval_minutes: int) -> int:
    """Keep the auto-sync interval inside the supported 1-60 minute range."""
    return max(MIN_INTERVAL_MINUTES, min(MAX_INTERVAL_MINUTES, int(interval_minutes)))


def load_settings() -> SyncSettings:
    load_dotenv()
    return SyncSettings(
        banner_store=(os.getenv("BANNER_STORE") or "sql").strip().lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./banners.db"),
        gcp_project_id=os.getenv("GCP_PROJECT_ID"),
        firestore_database_name=os.getenv("FIRESTORE_DATABASE_NAME"),
        banners_collection=os.getenv("BANNERS_COLLECTION", "sport-banners"),
        auto_sync_enabled=_env_bool("AUTO_SYNC_ENABLED", False),
        auto_sync_interval_minutes=clamp_interval(_env_int("AUTO_SYNC_INTERVAL_MINUTES", 2)),
        espn_base_url=os.getenv("ESPN_BASE_URL", "https://site.api.espn.com").rstrip("/"),
        ncaa_base_url=os.getenv("NCAA_BASE_URL", "https://ncaa-api.henrygd.me").rstrip("/"),
        ncaa_division=(os.getenv("NCAA_DIVISION") or "d1").strip().lower(),
        provider_timeout_seconds=_env_float("PROVIDER_TIMEOUT_SECONDS", 10.0),
        tracked_team_id=(os.getenv("TRACKED_TEAM_ID") or "ucsd").strip().lower(),
        tracked_team_aliases=_parse_aliases(os.getenv("TRACKED_TEAM_ALIASES")),
    )
