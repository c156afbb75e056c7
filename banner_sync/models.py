from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from banner_sync.db import Base


class SportBanner(Base):
    __tablename__ = "sport_banners"

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(String, nullable=True, default=None)
    source = Column(String, nullable=True, default=None)
    sport = Column(String, nullable=False, default="")
    home_team_id = Column(String, nullable=False, default="")
    away_team_id = Column(String, nullable=False, default="")
    home_score = Column(Integer, nullable=False, default=0)
    away_score = Column(Integer, nullable=False, default=0)
    game_status = Column(String, nullable=False, default="scheduled")
    game_time = Column(String, nullable=False, default="")
    venue = Column(String, nullable=False, default="")
    period = Column(String, nullable=False, default="")
    time_remaining = Column(String, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=True, index=True)
    is_enabled = Column(Boolean, nullable=False, default=False)
    substitutions_json = Column(Text, nullable=False, default="[]")
    highlights_json = Column(Text, nullable=False, default="[]")
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_updated = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
