"""Delivery (ball-by-ball) model for the Boundary Insights database."""

from enum import Enum

from sqlalchemy import Column, Integer, Boolean, ForeignKey, Index, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from .base import Base


class DismissalKind(str, Enum):
    """Enumeration of dismissal kinds."""
    BOWLED = "BOWLED"
    CAUGHT = "CAUGHT"
    LBW = "LBW"
    RUN_OUT = "RUN_OUT"
    STUMPED = "STUMPED"
    HIT_WICKET = "HIT_WICKET"
    RETIRED_HURT = "RETIRED_HURT"
    OBSTRUCTING_FIELD = "OBSTRUCTING_FIELD"
    HIT_BALL_TWICE = "HIT_BALL_TWICE"


class Delivery(Base):
    """One ball bowled within one innings of one match."""

    __tablename__ = "deliveries"

    # Natural key
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    inning_number = Column(Integer, nullable=False)
    over_number = Column(Integer, nullable=False)
    ball_in_over = Column(Integer, nullable=False)

    # Teams and players involved
    batting_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    bowling_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    striker_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    non_striker_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    bowler_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)

    # Ball outcome
    runs_batsman = Column(Integer, default=0, nullable=False)
    runs_extras = Column(Integer, default=0, nullable=False)
    runs_total = Column(Integer, default=0, nullable=False)

    # Extras
    is_wide = Column(Boolean, default=False, nullable=False)
    is_no_ball = Column(Boolean, default=False, nullable=False)
    is_bye = Column(Boolean, default=False, nullable=False)
    is_leg_bye = Column(Boolean, default=False, nullable=False)
    is_penalty = Column(Boolean, default=False, nullable=False)

    # Dismissal
    dismissal_kind = Column(SQLEnum(DismissalKind), nullable=True, index=True)
    dismissed_player_id = Column(Integer, ForeignKey("players.id"), nullable=True)

    # Relationships
    match = relationship("Match", back_populates="deliveries")
    batting_team = relationship("Team", foreign_keys=[batting_team_id])
    bowling_team = relationship("Team", foreign_keys=[bowling_team_id])
    striker = relationship("Player", foreign_keys=[striker_id], back_populates="deliveries_faced")
    non_striker = relationship("Player", foreign_keys=[non_striker_id])
    bowler = relationship("Player", foreign_keys=[bowler_id], back_populates="deliveries_bowled")
    dismissed_player = relationship("Player", foreign_keys=[dismissed_player_id])

    __table_args__ = (
        UniqueConstraint("match_id", "inning_number", "over_number", "ball_in_over", name="uq_delivery_position"),
        Index("idx_delivery_bowler_dismissal", "bowler_id", "dismissal_kind"),
        Index("idx_delivery_extras", "is_wide", "is_no_ball", "is_bye", "is_leg_bye"),
    )

    def __repr__(self) -> str:
        return f"<Delivery(Inning {self.inning_number}, Over {self.over_number}.{self.ball_in_over}, {self.runs_total} runs{', W' if self.dismissal_kind else ''})>"
