"""Match model for the Boundary Insights database."""

from enum import Enum

from sqlalchemy import Column, String, Integer, DateTime, Boolean, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from .base import Base


class TossDecision(str, Enum):
    """Enumeration of toss decisions."""
    BAT = "BAT"
    BOWL = "BOWL"


class ResultType(str, Enum):
    """Enumeration of match result types."""
    NORMAL = "NORMAL"
    TIE = "TIE"
    NO_RESULT = "NO_RESULT"


class Match(Base):
    """Match model representing a single game."""

    __tablename__ = "matches"

    # Source match id, the idempotency anchor for imports
    external_key = Column(String(50), nullable=False, unique=True, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    title = Column(String(200), nullable=True)

    # Teams
    home_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    away_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)

    # Match details
    match_date = Column(DateTime(timezone=True), nullable=False, index=True)
    venue = Column(String(200), nullable=True, index=True)
    city = Column(String(100), nullable=True, index=True)

    # Toss and result
    toss_winner_team_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    toss_decision = Column(SQLEnum(TossDecision), nullable=True)
    result_type = Column(SQLEnum(ResultType), nullable=True, index=True)
    winner_team_id = Column(Integer, ForeignKey("teams.id"), nullable=True, index=True)
    result_note = Column(String(255), nullable=True)
    dl_applied = Column(Boolean, default=False, nullable=False)

    # Match officials
    umpire_1 = Column(String(100), nullable=True)
    umpire_2 = Column(String(100), nullable=True)

    # Relationships
    season = relationship("Season", back_populates="matches")
    home_team = relationship("Team", foreign_keys=[home_team_id], back_populates="home_matches")
    away_team = relationship("Team", foreign_keys=[away_team_id], back_populates="away_matches")
    toss_winner = relationship("Team", foreign_keys=[toss_winner_team_id])
    winner = relationship("Team", foreign_keys=[winner_team_id])
    deliveries = relationship("Delivery", back_populates="match", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index("idx_match_season_date", "season_id", "match_date"),
        Index("idx_match_teams_date", "home_team_id", "away_team_id", "match_date"),
    )

    def __repr__(self) -> str:
        return f"<Match(external_key='{self.external_key}', {self.home_team.name if self.home_team else 'TBD'} vs {self.away_team.name if self.away_team else 'TBD'})>"
