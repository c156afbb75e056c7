"""SQLAlchemy-backed banner store for local development."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from banner_sync.models import SportBanner
from banner_sync.schemas import BannerRecord
from banner_sync.storage.base import BannerNotFoundError

logger = logging.getLogger(__name__)

# Stored (camelCase) field -> column attribute
_COLUMNS: dict[str, str] = {
    "gameId": "game_id",
    "source": "source",
    "sport": "sport",
    "homeTeamId": "home_team_id",
    "awayTeamId": "away_team_id",
    "homeScore": "home_score",
    "awayScore": "away_score",
    "gameStatus": "game_status",
    "gameTime": "game_time",
    "venue": "venue",
    "period": "period",
    "timeRemaining": "time_remaining",
    "date": "date",
    "isEnabled": "is_enabled",
    "createdBy": "created_by",
    "updatedBy": "updated_by",
    "lastUpdated": "last_updated",
}
_JSON_COLUMNS: dict[str, str] = {
    "substitutions": "substitutions_json",
    "highlights": "highlights_json",
}


def _ensure_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _load_json_list(raw: str | None) -> list[dict[str, Any]]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return value if isinstance(value, list) else []


def _apply_fields(banner: SportBanner, fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        if key in _COLUMNS:
            if isinstance(value, datetime):
                value = _ensure_utc(value)
            setattr(banner, _COLUMNS[key], value)
        elif key in _JSON_COLUMNS:
            setattr(banner, _JSON_COLUMNS[key], json.dumps(value or [], ensure_ascii=False))
        else:
            logger.debug("Ignoring unknown banner field %s", key)


def _to_record(banner: SportBanner) -> BannerRecord:
    return BannerRecord(
        id=str(banner.id),
        game_id=banner.game_id,
        source=banner.source,
        sport=banner.sport,
        home_team_id=banner.home_team_id,
        away_team_id=banner.away_team_id,
        home_score=banner.home_score,
        away_score=banner.away_score,
        game_status=banner.game_status,
        game_time=banner.game_time,
        venue=banner.venue,
        period=banner.period,
        time_remaining=banner.time_remaining,
        date=_ensure_utc(banner.date),
        is_enabled=banner.is_enabled,
        substitutions=_load_json_list(banner.substitutions_json),
        highlights=_load_json_list(banner.highlights_json),
        last_updated=_ensure_utc(banner.last_updated),
        created_by=banner.created_by,
        updated_by=banner.updated_by,
    )


class SqlBannerStore:
    def __init__(self, session_factory: sessionmaker, actor: str = "sync") -> None:
        self.session_factory = session_factory
        self.actor = actor

    def _get(self, db: Session, banner_id: str) -> SportBanner:
        try:
            pk = int(banner_id)
        except (TypeError, ValueError):
            raise BannerNotFoundError(banner_id) from None
        banner = db.query(SportBanner).filter(SportBanner.id == pk).one_or_none()
        if banner is None:
            raise BannerNotFoundError(banner_id)
        return banner

    def list_all_banners(self) -> list[BannerRecord]:
        with self.session_factory() as db:
            banners = (
                db.query(SportBanner)
                .order_by(SportBanner.date.desc(), SportBanner.id.asc())
                .all()
            )
            return [_to_record(banner) for banner in banners]

    def create_banner(self, fields: dict[str, Any]) -> str:
        with self.session_factory() as db:
            banner = SportBanner(created_by=self.actor, updated_by=self.actor)
            _apply_fields(banner, fields)
            db.add(banner)
            db.commit()
            db.refresh(banner)
            return str(banner.id)

    def update_banner(self, banner_id: str, fields: dict[str, Any]) -> None:
        with self.session_factory() as db:
            banner = self._get(db, banner_id)
            _apply_fields(banner, fields)
            banner.updated_by = self.actor
            db.commit()

    def delete_banner(self, banner_id: str) -> None:
        with self.session_factory() as db:
            banner = self._get(db, banner_id)
            db.delete(banner)
            db.commit()
