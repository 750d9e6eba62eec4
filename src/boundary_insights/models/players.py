"""Player model for the Boundary Insights database."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import Base


UNKNOWN_PLAYER_NAME = "Unknown Player"


class Player(Base):
    """Player model.

    ``name`` is indexed but deliberately not unique: players are resolved with a
    find-first lookup, so two importer processes running at the same time can
    both create a row for the same name.
    """

    __tablename__ = "players"

    name = Column(String(150), nullable=False, index=True)

    # Relationships
    deliveries_faced = relationship("Delivery", foreign_keys="Delivery.striker_id", back_populates="striker")
    deliveries_bowled = relationship("Delivery", foreign_keys="Delivery.bowler_id", back_populates="bowler")

    def __repr__(self) -> str:
        return f"<Player(name='{self.name}')>"
