"""Pydantic models for raw source documents and normalized delivery records.

Raw models mirror the EntitySport-style JSON shapes found under the data root.
Numeric-looking fields are typed ``Any`` on purpose: the source mixes numbers
and numeric strings, and coercion happens in :mod:`.transformers` with
explicit fallbacks rather than at validation time.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import DismissalKind


class RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


# --- match_info/*.json ---------------------------------------------------

class TeamInfo(RawModel):
    team_id: Any = None
    name: Optional[str] = None
    short_name: Optional[str] = None


class CompetitionInfo(RawModel):
    season: Any = None
    abbr: Optional[str] = None
    title: Optional[str] = None


class VenueInfo(RawModel):
    name: Optional[str] = None
    location: Optional[str] = None


class TossInfo(RawModel):
    winner: Any = None
    decision: Any = None
    text: Optional[str] = None


class MatchInfo(RawModel):
    match_id: Any = None
    title: Optional[str] = None
    competition: Optional[CompetitionInfo] = None
    teama: Optional[TeamInfo] = None
    teamb: Optional[TeamInfo] = None
    date_start: Optional[str] = None
    timestamp_start: Any = None
    venue: Optional[VenueInfo] = None
    toss: Optional[TossInfo] = None
    winning_team_id: Any = None
    result_type: Any = None
    status_note: Optional[str] = None
    match_dls_affected: Any = None
    umpires: Optional[str] = None

    @property
    def has_numeric_match_id(self) -> bool:
        """True when ``match_id`` is a JSON number (not a string or boolean)."""
        return isinstance(self.match_id, (int, float)) and not isinstance(self.match_id, bool)

    @property
    def external_key(self) -> str:
        """Stable string form of the source match id."""
        if isinstance(self.match_id, float) and self.match_id.is_integer():
            return str(int(self.match_id))
        return str(self.match_id)


# --- match_innings_commentary/*.json -------------------------------------

class InningHeader(RawModel):
    number: Any = None
    batting_team_id: Any = None
    fielding_team_id: Any = None


class RosterTeam(RawModel):
    tid: Any = None
    title: Optional[str] = None
    abbr: Optional[str] = None


class RosterPlayer(RawModel):
    pid: Any = None
    title: Optional[str] = None


class BatsmanRef(RawModel):
    batsman_id: Any = None


class CommentaryBall(RawModel):
    over: Any = None
    ball: Any = None
    batsman_id: Any = None
    bowler_id: Any = None
    run: Any = None
    bat_run: Any = None
    wideball: Any = None
    noball: Any = None
    bye_run: Any = None
    legbye_run: Any = None
    penalty_run: Any = None
    wicket_batsman_id: Any = None
    how_out: Any = None
    batsmen: Optional[List[BatsmanRef]] = None


class CommentaryDocument(RawModel):
    inning: Optional[InningHeader] = None
    teams: Optional[List[RosterTeam]] = None
    players: Optional[List[RosterPlayer]] = None
    commentaries: Optional[List[CommentaryBall]] = None


# --- normalized output ---------------------------------------------------

class DeliveryRecord(BaseModel):
    """A fully resolved delivery row, ready to upsert."""

    match_id: int
    inning_number: int
    over_number: int
    ball_in_over: int
    batting_team_id: int
    bowling_team_id: int
    striker_id: int
    non_striker_id: int
    bowler_id: int
    runs_batsman: int = 0
    runs_extras: int = Field(default=0, ge=0)
    runs_total: int = 0
    is_wide: bool = False
    is_no_ball: bool = False
    is_bye: bool = False
    is_leg_bye: bool = False
    is_penalty: bool = False
    dismissal_kind: Optional[DismissalKind] = None
    dismissed_player_id: Optional[int] = None

    @property
    def natural_key(self) -> tuple:
        return (self.match_id, self.inning_number, self.over_number, self.ball_in_over)
