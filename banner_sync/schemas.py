from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GameStatus = Literal["scheduled", "live", "halftime", "final", "postponed"]
GameSource = Literal["espn", "ncaa"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Game(_CamelModel):
    """
    Normalized contest shared by both providers. Recomputed every sync cycle.
    """

    id: str
    sport: str
    source: GameSource
    home_team_id: str
    away_team_id: str
    home_score: int = Field(default=0, ge=0)
    away_score: int = Field(default=0, ge=0)
    game_status: GameStatus = "scheduled"
    game_time: str = ""
    venue: str = ""
    period: str = ""
    time_remaining: str = ""
    date: datetime
    is_enabled: bool = True

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.id)

    def banner_fields(self) -> dict[str, Any]:
        """Fields copied onto a banner record, keyed the way the store keeps them."""
        fields = self.model_dump(by_alias=True, exclude={"id"})
        fields["gameId"] = self.id
        return fields


class BannerRecord(_CamelModel):
    id: str
    game_id: Optional[str] = None
    source: Optional[GameSource] = None
    sport: str = ""
    home_team_id: str = ""
    away_team_id: str = ""
    home_score: int = 0
    away_score: int = 0
    game_status: GameStatus = "scheduled"
    game_time: str = ""
    venue: str = ""
    period: str = ""
    time_remaining: str = ""
    date: Optional[datetime] = None
    is_enabled: bool = False
    substitutions: list[dict[str, Any]] = Field(default_factory=list)
    highlights: list[dict[str, Any]] = Field(default_factory=list)
    last_updated: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class BannerPatch(_CamelModel):
    """Operator edits applied to a single banner."""

    is_enabled: Optional[bool] = None
    game_status: Optional[GameStatus] = None
    home_score: Optional[int] = Field(default=None, ge=0)
    away_score: Optional[int] = Field(default=None, ge=0)
    period: Optional[str] = None
    time_remaining: Optional[str] = None


class SyncStatus(_CamelModel):
    is_running: bool
    last_sync_at: Optional[datetime] = None
    interval_minutes: int


class ConnectivityReport(BaseModel):
    espn: bool = False
    ncaa: bool = False
    details: list[str] = Field(default_factory=list)


class ScoreboardOverview(_CamelModel):
    live_games: list[Game]
    upcoming_games: list[Game]
    total_sports: int
    api_status: dict[str, bool]


class SyncResultOut(_CamelModel):
    total_games: int
    created: int
    updated: int
    deleted: int
    errors: int
