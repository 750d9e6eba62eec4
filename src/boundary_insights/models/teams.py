"""Team model for the Boundary Insights database."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import Base


UNKNOWN_TEAM_NAME = "Unknown Team"


class Team(Base):
    """Team model, unique by trimmed display name."""

    __tablename__ = "teams"

    name = Column(String(100), nullable=False, unique=True, index=True)

    # Relationships
    home_matches = relationship("Match", foreign_keys="Match.home_team_id", back_populates="home_team")
    away_matches = relationship("Match", foreign_keys="Match.away_team_id", back_populates="away_team")

    def __repr__(self) -> str:
        return f"<Team(name='{self.name}')>"
