"""Unit tests for coercion helpers and the delivery normalizer."""

from __future__ import annotations

from typing import Dict, Optional

import pytest

from boundary_insights.etl.models import CommentaryBall, CommentaryDocument
from boundary_insights.etl.transformers import (
    DeliveryNormalizer,
    InningsContext,
    classify_dismissal,
    clean_name,
    to_flag,
    to_int,
)
from boundary_insights.models import DismissalKind, UNKNOWN_PLAYER_NAME

pytestmark = pytest.mark.unit


class FakePlayers:
    """Name -> id resolver that mimics get-or-create without a database."""

    def __init__(self):
        self.ids: Dict[str, int] = {}

    def __call__(self, name: Optional[str]) -> int:
        normalized = clean_name(name, UNKNOWN_PLAYER_NAME)
        return self.ids.setdefault(normalized, len(self.ids) + 1)


@pytest.fixture
def players() -> FakePlayers:
    return FakePlayers()


@pytest.fixture
def innings() -> InningsContext:
    return InningsContext(
        match_id=1,
        inning_number=1,
        batting_team_id=10,
        bowling_team_id=20,
        roster={7: "Rohit Sharma", 8: "Ishan Kishan", 3: "Deepak Chahar"},
    )


def normalize(raw: dict, innings: InningsContext, players: FakePlayers):
    return DeliveryNormalizer().normalize(CommentaryBall.model_validate(raw), innings, players)


class TestToInt:

    @pytest.mark.parametrize("value, expected", [
        (5, 5),
        ("12", 12),
        (" 7 ", 7),
        ("3.5", 3),
        (4.9, 4),
        ("-2", -2),
    ])
    def test_coercible_values(self, value, expected):
        assert to_int(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", True, False, float("nan"), float("inf"), [1], {}])
    def test_uncoercible_values_use_fallback(self, value):
        assert to_int(value, 0) == 0
        assert to_int(value, None) is None


class TestToFlag:

    @pytest.mark.parametrize("value, expected", [
        (True, True),
        (False, False),
        (None, False),
        (1, True),
        (0, False),
        ("true", True),
        ("TRUE", True),
        ("false", False),
        ("", False),
    ])
    def test_flags(self, value, expected):
        assert to_flag(value) is expected


class TestCleanName:

    def test_trims(self):
        assert clean_name("  Mumbai Indians ", "Unknown Team") == "Mumbai Indians"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_defaults_when_empty(self, value):
        assert clean_name(value, "Unknown Team") == "Unknown Team"


class TestClassifyDismissal:

    @pytest.mark.parametrize("text, expected", [
        ("Bowled", DismissalKind.BOWLED),
        ("c Dhoni b Chahar", None),
        ("Caught", DismissalKind.CAUGHT),
        ("caught and bowled", DismissalKind.BOWLED),
        ("LBW", DismissalKind.LBW),
        ("lbw b Chahar", None),
        ("Run Out", DismissalKind.RUN_OUT),
        ("runout", DismissalKind.RUN_OUT),
        ("Stumped", DismissalKind.STUMPED),
        ("Hit Wicket", DismissalKind.HIT_WICKET),
        ("Retired Hurt", DismissalKind.RETIRED_HURT),
        ("Obstructing the field", DismissalKind.OBSTRUCTING_FIELD),
        ("obstructing field", DismissalKind.OBSTRUCTING_FIELD),
        ("Hit ball twice", DismissalKind.HIT_BALL_TWICE),
        ("Timed out", None),
        ("", None),
        (None, None),
    ])
    def test_vocabulary(self, text, expected):
        assert classify_dismissal(text) == expected


class TestInningsContext:

    def test_roster_from_document(self):
        document = CommentaryDocument.model_validate({
            "players": [{"pid": 7, "title": " Rohit Sharma "}, {"pid": "8", "title": "Ishan Kishan"}, {"title": "No Id"}],
        })
        assert InningsContext.roster_from(document) == {7: "Rohit Sharma", 8: "Ishan Kishan"}

    def test_roster_from_document_without_players(self):
        assert InningsContext.roster_from(CommentaryDocument()) == {}


class TestDeliveryNormalizer:

    def test_simple_single(self, innings, players):
        record = normalize({
            "over": 0, "ball": 1, "batsman_id": 7, "bowler_id": 3, "run": 1, "bat_run": 1,
            "batsmen": [{"batsman_id": 7}, {"batsman_id": 8}],
        }, innings, players)

        assert record.natural_key == (1, 1, 0, 1)
        assert (record.runs_batsman, record.runs_extras, record.runs_total) == (1, 0, 1)
        assert not any([record.is_wide, record.is_no_ball, record.is_bye, record.is_leg_bye, record.is_penalty])
        assert record.striker_id == players.ids["Rohit Sharma"]
        assert record.non_striker_id == players.ids["Ishan Kishan"]
        assert record.bowler_id == players.ids["Deepak Chahar"]
        assert record.batting_team_id == 10
        assert record.bowling_team_id == 20
        assert record.dismissal_kind is None
        assert record.dismissed_player_id is None

    def test_string_positions_are_coerced(self, innings, players):
        record = normalize({"over": "12", "ball": "4", "batsman_id": "7", "bowler_id": "3", "run": "4", "bat_run": "4"},
                           innings, players)
        assert (record.over_number, record.ball_in_over) == (12, 4)
        assert record.runs_total == 4
        assert record.striker_id == players.ids["Rohit Sharma"]

    @pytest.mark.parametrize("raw", [
        {"over": "abc", "ball": 1},
        {"over": 3, "ball": "x"},
        {"ball": 2},
        {"over": 3},
        {"over": None, "ball": None},
    ])
    def test_unparseable_position_is_skipped(self, raw, innings, players):
        raw.update({"batsman_id": 7, "bowler_id": 3, "run": 1, "bat_run": 1})
        assert normalize(raw, innings, players) is None
        assert players.ids == {}

    def test_extras_never_negative(self, innings, players):
        record = normalize({"over": 1, "ball": 2, "batsman_id": 7, "bowler_id": 3, "run": 1, "bat_run": 4},
                           innings, players)
        assert record.runs_extras == 0
        assert record.runs_batsman == 4
        assert record.runs_total == 1

    def test_wide_with_extras(self, innings, players):
        record = normalize({"over": 2, "ball": 3, "batsman_id": 7, "bowler_id": 3, "run": 5, "bat_run": 0,
                            "wideball": True}, innings, players)
        assert record.is_wide
        assert not record.is_no_ball
        assert record.runs_extras == 5

    def test_extra_subfields_are_independent_flags(self, innings, players):
        record = normalize({"over": 2, "ball": 4, "batsman_id": 7, "bowler_id": 3, "run": 3,
                            "noball": "true", "bye_run": "1", "legbye_run": 2, "penalty_run": "0"},
                           innings, players)
        assert record.is_no_ball
        assert record.is_bye
        assert record.is_leg_bye
        assert not record.is_penalty
        assert record.runs_batsman == 0
        assert record.runs_extras == 3

    def test_roster_miss_falls_back_to_unknown_player(self, innings, players):
        record = normalize({"over": 0, "ball": 2, "batsman_id": 99, "bowler_id": None, "run": 0},
                           innings, players)
        unknown = players.ids[UNKNOWN_PLAYER_NAME]
        assert record.striker_id == unknown
        assert record.bowler_id == unknown
        assert record.non_striker_id == unknown

    def test_non_striker_is_other_batsman(self, innings, players):
        record = normalize({"over": 5, "ball": 1, "batsman_id": 8, "bowler_id": 3, "run": 0,
                            "batsmen": [{"batsman_id": 8}, {"batsman_id": 0}, {"batsman_id": 7}]},
                           innings, players)
        assert record.striker_id == players.ids["Ishan Kishan"]
        assert record.non_striker_id == players.ids["Rohit Sharma"]

    def test_non_striker_defaults_when_only_striker_listed(self, innings, players):
        record = normalize({"over": 5, "ball": 2, "batsman_id": 8, "bowler_id": 3, "run": 0,
                            "batsmen": [{"batsman_id": 8}]}, innings, players)
        assert record.non_striker_id == players.ids[UNKNOWN_PLAYER_NAME]

    def test_wicket(self, innings, players):
        record = normalize({"over": 7, "ball": 6, "batsman_id": 7, "bowler_id": 3, "run": 0, "bat_run": 0,
                            "how_out": "Caught", "wicket_batsman_id": "7",
                            "batsmen": [{"batsman_id": 7}, {"batsman_id": 8}]}, innings, players)
        assert record.dismissal_kind == DismissalKind.CAUGHT
        assert record.dismissed_player_id == players.ids["Rohit Sharma"]

    def test_dismissed_player_without_kind(self, innings, players):
        record = normalize({"over": 7, "ball": 6, "batsman_id": 7, "bowler_id": 3, "run": 0,
                            "how_out": "Timed out", "wicket_batsman_id": 8}, innings, players)
        assert record.dismissal_kind is None
        assert record.dismissed_player_id == players.ids["Ishan Kishan"]

    def test_zero_wicket_batsman_id_means_no_dismissed_player(self, innings, players):
        record = normalize({"over": 7, "ball": 5, "batsman_id": 7, "bowler_id": 3, "run": 0,
                            "wicket_batsman_id": 0}, innings, players)
        assert record.dismissed_player_id is None
