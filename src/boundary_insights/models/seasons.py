"""Season model for the Boundary Insights database."""

from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import relationship

from .base import Base


UNKNOWN_SEASON_NAME = "Unknown Season"


class Season(Base):
    """A competition season, keyed by year (0 when the year is unknown)."""

    __tablename__ = "seasons"

    year = Column(Integer, nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)

    matches = relationship("Match", back_populates="season")

    def __repr__(self) -> str:
        return f"<Season(year={self.year}, name='{self.name}')>"
