"""Get-or-create resolution of seasons, teams and players.

Every method takes the caller's session and flushes newly created rows so the
returned id can be referenced immediately.

Player lookups are find-first by name without a uniqueness constraint. Inside
one importer process that is safe, because resolution is strictly sequential.
Two importer processes running against the same database at the same time can
both miss the lookup and create duplicate players; run one import at a time.
"""

from __future__ import annotations

from typing import Any

from loguru import logger as default_logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from .transformers import clean_name, to_int
from ..models import (
    Player, Season, Team,
    UNKNOWN_PLAYER_NAME, UNKNOWN_SEASON_NAME, UNKNOWN_TEAM_NAME,
)


class EntityResolver:
    """Resolve free-text source values to entity ids, creating rows on first sight."""

    def __init__(self, season_label_prefix: str = "IPL", logger=None):
        self.season_label_prefix = season_label_prefix
        self.logger = logger or default_logger

    def season_name(self, year: int) -> str:
        if year == 0:
            return UNKNOWN_SEASON_NAME
        return f"{self.season_label_prefix} {year}".strip()

    def resolve_season(self, session: Session, year: Any) -> int:
        """Return the id of the season for ``year`` (0 when unknown), renaming it if needed."""
        resolved_year = to_int(year, 0)
        name = self.season_name(resolved_year)

        season = session.execute(
            select(Season).where(Season.year == resolved_year)
        ).scalar_one_or_none()

        if season is None:
            season = Season(year=resolved_year, name=name)
            session.add(season)
            session.flush()
            self.logger.debug(f"Created season {name} (id={season.id})")
        elif season.name != name:
            season.name = name
            session.flush()
        return season.id

    def resolve_team(self, session: Session, name: Any) -> int:
        """Return the id of the team called ``name`` (or "Unknown Team")."""
        normalized = clean_name(name, UNKNOWN_TEAM_NAME)

        team = session.execute(
            select(Team).where(Team.name == normalized)
        ).scalar_one_or_none()

        if team is None:
            team = Team(name=normalized)
            session.add(team)
            session.flush()
            self.logger.debug(f"Created team {normalized} (id={team.id})")
        return team.id

    def resolve_player(self, session: Session, name: Any) -> int:
        """Return the id of the first player called ``name`` (or "Unknown Player")."""
        normalized = clean_name(name, UNKNOWN_PLAYER_NAME)

        player = session.execute(
            select(Player).where(Player.name == normalized).order_by(Player.id).limit(1)
        ).scalar_one_or_none()

        if player is None:
            player = Player(name=normalized)
            session.add(player)
            session.flush()
            self.logger.debug(f"Created player {normalized} (id={player.id})")
        return player.id
