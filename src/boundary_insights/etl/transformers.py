"""Normalization of raw commentary records into delivery rows."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .models import CommentaryBall, CommentaryDocument, DeliveryRecord
from ..models import DismissalKind


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TRUE_STRINGS = {"true", "1", "yes"}

# Checked in order; the first matching rule wins.
_DISMISSAL_RULES = [
    (lambda t: "bowled" in t, DismissalKind.BOWLED),
    (lambda t: "caught" in t, DismissalKind.CAUGHT),
    (lambda t: t == "lbw", DismissalKind.LBW),
    (lambda t: "run out" in t or "runout" in t, DismissalKind.RUN_OUT),
    (lambda t: "stumped" in t, DismissalKind.STUMPED),
    (lambda t: "hit wicket" in t, DismissalKind.HIT_WICKET),
    (lambda t: "retired hurt" in t, DismissalKind.RETIRED_HURT),
    (lambda t: "obstructing" in t, DismissalKind.OBSTRUCTING_FIELD),
    (lambda t: "hit ball twice" in t, DismissalKind.HIT_BALL_TWICE),
]


def to_int(value: Any, fallback: Optional[int] = 0) -> Optional[int]:
    """Coerce a loosely typed source value to ``int``.

    Integers pass through, finite floats are truncated and strings contribute
    their leading integer (``"3.5"`` gives 3). Everything else, booleans
    included, yields ``fallback``.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else fallback
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else fallback
    return fallback


def to_flag(value: Any) -> bool:
    """Coerce a source flag; strings are true only for "true", "1" or "yes"."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def clean_name(value: Any, default: str) -> str:
    """Trim a display name, substituting ``default`` when nothing is left."""
    if value is None:
        return default
    name = str(value).strip()
    return name or default


def classify_dismissal(how_out: Any) -> Optional[DismissalKind]:
    """Map free-text "how out" commentary to a :class:`DismissalKind`."""
    if not how_out or not isinstance(how_out, str):
        return None
    text = how_out.lower()
    for matches, kind in _DISMISSAL_RULES:
        if matches(text):
            return kind
    return None


@dataclass
class InningsContext:
    """Per-file values shared by every delivery of one innings."""

    match_id: int
    inning_number: int
    batting_team_id: int
    bowling_team_id: int
    roster: Dict[int, str] = field(default_factory=dict)

    @staticmethod
    def roster_from(document: CommentaryDocument) -> Dict[int, str]:
        """Build the player-id to name map from a commentary document."""
        roster: Dict[int, str] = {}
        for player in document.players or []:
            pid = to_int(player.pid, 0)
            if pid:
                roster[pid] = (player.title or "").strip()
        return roster

    def player_name(self, player_id: Optional[int]) -> Optional[str]:
        if not player_id:
            return None
        return self.roster.get(player_id)


class DeliveryNormalizer:
    """Turn one :class:`CommentaryBall` into a :class:`DeliveryRecord`."""

    def normalize(
        self,
        ball: CommentaryBall,
        innings: InningsContext,
        resolve_player: Callable[[Optional[str]], int],
    ) -> Optional[DeliveryRecord]:
        """Normalize ``ball``; returns ``None`` when its position cannot be parsed.

        ``resolve_player`` maps a display name (or ``None``) to a player id.
        """
        over_number = to_int(ball.over, None)
        ball_in_over = to_int(ball.ball, None)
        if over_number is None or ball_in_over is None:
            return None

        striker_pid = to_int(ball.batsman_id, 0)
        bowler_pid = to_int(ball.bowler_id, 0)

        striker_id = resolve_player(innings.player_name(striker_pid))
        bowler_id = resolve_player(innings.player_name(bowler_pid))
        non_striker_id = resolve_player(innings.player_name(self._non_striker_pid(ball, striker_pid)))

        runs_total = to_int(ball.run, 0)
        runs_batsman = to_int(ball.bat_run, 0)
        runs_extras = max(0, runs_total - runs_batsman)

        dismissal_kind = classify_dismissal(ball.how_out)
        dismissed_pid = to_int(ball.wicket_batsman_id, 0)
        dismissed_player_id = resolve_player(innings.player_name(dismissed_pid)) if dismissed_pid else None

        return DeliveryRecord(
            match_id=innings.match_id,
            inning_number=innings.inning_number,
            over_number=over_number,
            ball_in_over=ball_in_over,
            batting_team_id=innings.batting_team_id,
            bowling_team_id=innings.bowling_team_id,
            striker_id=striker_id,
            non_striker_id=non_striker_id,
            bowler_id=bowler_id,
            runs_batsman=runs_batsman,
            runs_extras=runs_extras,
            runs_total=runs_total,
            is_wide=to_flag(ball.wideball),
            is_no_ball=to_flag(ball.noball),
            is_bye=to_int(ball.bye_run, 0) > 0,
            is_leg_bye=to_int(ball.legbye_run, 0) > 0,
            is_penalty=to_int(ball.penalty_run, 0) > 0,
            dismissal_kind=dismissal_kind,
            dismissed_player_id=dismissed_player_id,
        )

    @staticmethod
    def _non_striker_pid(ball: CommentaryBall, striker_pid: int) -> Optional[int]:
        """First batsman id on the ball that is not the striker."""
        for ref in ball.batsmen or []:
            pid = to_int(ref.batsman_id, 0)
            if pid and pid != striker_pid:
                return pid
        return None
