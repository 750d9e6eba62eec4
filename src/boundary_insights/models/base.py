"""Declarative base shared by the ingestion tables.

Seasons, teams, players, matches and deliveries all get a surrogate integer
``id`` plus ``created_at``/``updated_at`` audit timestamps from here. Natural
keys (season year, team name, match external key, delivery position) are
declared on the individual models.
"""

from typing import Any, Iterable

from sqlalchemy import Column, Integer, DateTime, func
from sqlalchemy.orm import declarative_base


AUDIT_COLUMNS = ("created_at", "updated_at")


class IngestedRow:
    """Columns and helpers common to every imported row."""

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self, exclude: Iterable[str] = ()) -> dict[str, Any]:
        """Column values keyed by column name, minus ``exclude``."""
        skipped = set(exclude)
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
            if column.name not in skipped
        }


Base = declarative_base(cls=IngestedRow)
