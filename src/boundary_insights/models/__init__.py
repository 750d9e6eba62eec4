"""Database models for the Boundary Insights ingestion system."""

from .base import Base
from .seasons import Season, UNKNOWN_SEASON_NAME
from .teams import Team, UNKNOWN_TEAM_NAME
from .players import Player, UNKNOWN_PLAYER_NAME
from .matches import Match, TossDecision, ResultType
from .deliveries import Delivery, DismissalKind

__all__ = [
    "Base",
    "Season",
    "Team",
    "Player",
    "Match",
    "TossDecision",
    "ResultType",
    "Delivery",
    "DismissalKind",
    "UNKNOWN_SEASON_NAME",
    "UNKNOWN_TEAM_NAME",
    "UNKNOWN_PLAYER_NAME",
]
