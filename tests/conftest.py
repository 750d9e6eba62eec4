"""Shared fixtures: an in-memory database and an on-disk sample dataset."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from boundary_insights.database import create_tables
from boundary_insights.etl.sources import COMMENTARY_DIR, MATCH_INFO_DIR


MATCH_BASENAME = "ipl_2023_match_01_mi_vs_csk"

SAMPLE_MATCH_INFO: Dict[str, Any] = {
    "match_id": 501,
    "title": "Mumbai Indians vs Chennai Super Kings",
    "competition": {"season": "2023", "abbr": "ipl", "title": "Indian Premier League"},
    "teama": {"team_id": 10, "name": "Mumbai Indians", "short_name": "MI"},
    "teamb": {"team_id": 20, "name": "Chennai Super Kings", "short_name": "CSK"},
    "date_start": "2023-04-08 19:30:00",
    "timestamp_start": 1680982200,
    "venue": {"name": "Wankhede Stadium", "location": "Mumbai"},
    "toss": {"winner": 10, "decision": 1, "text": "Mumbai Indians elected to bat"},
    "winning_team_id": 10,
    "result_type": 2,
    "status_note": "Mumbai Indians won by 7 runs",
    "match_dls_affected": "false",
    "umpires": "Nitin Menon (India), Anil Chaudhary (India), Rohan Pandit (India, TV)",
}

SAMPLE_COMMENTARY: Dict[str, Any] = {
    "match": {"status": 2},
    "inning": {"number": 1, "batting_team_id": 10, "fielding_team_id": 20},
    "teams": [
        {"tid": 10, "title": "Mumbai Indians", "abbr": "MI"},
        {"tid": 20, "title": "Chennai Super Kings", "abbr": "CSK"},
    ],
    "players": [
        {"pid": 7, "title": "Rohit Sharma"},
        {"pid": 8, "title": "Ishan Kishan"},
        {"pid": 3, "title": "Deepak Chahar"},
    ],
    "commentaries": [
        {
            "over": 0, "ball": 1, "batsman_id": 7, "bowler_id": 3,
            "run": 1, "bat_run": 1,
            "batsmen": [{"batsman_id": 7}, {"batsman_id": 8}],
        },
    ],
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def match_info() -> Dict[str, Any]:
    return copy.deepcopy(SAMPLE_MATCH_INFO)


@pytest.fixture
def commentary() -> Dict[str, Any]:
    return copy.deepcopy(SAMPLE_COMMENTARY)


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    root = tmp_path / "ipl"
    (root / MATCH_INFO_DIR).mkdir(parents=True)
    (root / COMMENTARY_DIR).mkdir(parents=True)
    return root


@pytest.fixture
def write_match_info(data_root: Path) -> Callable[..., Path]:
    def _write(document: Any, basename: str = MATCH_BASENAME) -> Path:
        path = data_root / MATCH_INFO_DIR / f"{basename}_info.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_commentary(data_root: Path) -> Callable[..., Path]:
    def _write(document: Any, basename: str = MATCH_BASENAME, inning: int = 1) -> Path:
        name = f"innings_{inning}_{basename}_match_innings_{inning}_commentary.json"
        path = data_root / COMMENTARY_DIR / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write
