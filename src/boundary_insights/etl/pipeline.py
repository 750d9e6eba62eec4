"""Match import orchestrator.

Joins each innings commentary file to its match-info record, resolves the
entities it references and writes the match plus every delivery inside one
transaction per file. Files are processed one at a time in sorted order.

Re-running the import is safe: a file whose match already has deliveries stored
is skipped, and every delivery write is an upsert on (match, inning, over, ball).
Running two imports against the same database concurrently is not supported
(see :mod:`.resolver`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger as default_logger
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .loaders import DatabaseLoader
from .match_index import MatchInfoIndex
from .models import CommentaryDocument, MatchInfo
from .resolver import EntityResolver
from .sources import COMMENTARY_DIR, MATCH_INFO_DIR, JoinKey, read_json_document, walk_json_files
from .transformers import DeliveryNormalizer, InningsContext, to_int
from ..config import settings
from ..database import dispose_engine, get_session_local, session_scope
from ..exceptions import DocumentParseError, ImportSetupError
from ..models import ResultType, TossDecision


# Source result_type codes. Codes missing here are stored as unknown (NULL).
RESULT_TYPES: Dict[int, ResultType] = {
    2: ResultType.NORMAL,
    3: ResultType.TIE,
    4: ResultType.NO_RESULT,
}

TOSS_DECISIONS: Dict[int, TossDecision] = {
    1: TossDecision.BAT,
    2: TossDecision.BOWL,
}


class FileOutcome(str, Enum):
    """Terminal state of one commentary file."""
    IMPORTED = "imported"
    SKIPPED_NO_JOIN = "skipped_no_join"
    SKIPPED_EXISTING = "skipped_existing"
    FAILED = "failed"


@dataclass
class FileResult:
    outcome: FileOutcome
    external_key: Optional[str] = None
    deliveries_written: int = 0
    deliveries_skipped: int = 0


def parse_match_date(info: MatchInfo, now: Optional[datetime] = None) -> datetime:
    """Match start time from ``date_start`` (UTC), else ``timestamp_start``, else now."""
    if info.date_start:
        try:
            parsed = datetime.fromisoformat(info.date_start.strip().replace(" ", "T"))
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    timestamp = to_int(info.timestamp_start, 0)
    if timestamp:
        try:
            return datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass

    return now or datetime.now(timezone.utc)


def split_umpires(umpires: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """First two names of a comma-separated umpire string."""
    if not umpires:
        return None, None
    parts = [part.strip() or None for part in umpires.split(",")]
    parts += [None, None]
    return parts[0], parts[1]


def team_names_by_id(info: MatchInfo) -> Dict[int, str]:
    """Map the match-info team ids to their trimmed names."""
    names: Dict[int, str] = {}
    for team in (info.teama, info.teamb):
        if team is None:
            continue
        team_id = to_int(team.team_id, 0)
        name = (team.name or "").strip()
        if team_id and name:
            names[team_id] = name
    return names


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class ImportPipeline:
    """Import innings commentary files joined with their match metadata."""

    def __init__(
        self,
        data_root: Union[str, Path, None] = None,
        session_factory: Optional[sessionmaker] = None,
        resolver: Optional[EntityResolver] = None,
        normalizer: Optional[DeliveryNormalizer] = None,
        loader: Optional[DatabaseLoader] = None,
        logger=None,
    ):
        self.data_root = Path(data_root or settings.importer.data_root)
        self.logger = logger or default_logger
        self.session_factory = session_factory or get_session_local()
        self.resolver = resolver or EntityResolver(settings.importer.season_label_prefix, logger=self.logger)
        self.normalizer = normalizer or DeliveryNormalizer()
        self.loader = loader or DatabaseLoader(logger=self.logger)

    @property
    def match_info_dir(self) -> Path:
        return self.data_root / MATCH_INFO_DIR

    @property
    def commentary_dir(self) -> Path:
        return self.data_root / COMMENTARY_DIR

    def run(self) -> Dict[str, Any]:
        """Run the full import; raises :class:`ImportSetupError` on fatal setup failures."""
        self.logger.info("Starting match data import")
        self.logger.info(f"Data root: {self.data_root}")
        start_time = datetime.now()

        index = self.build_index()
        files = self.discover_commentary_files()
        self.check_connectivity()

        stats: Dict[str, Any] = {
            "match_info_indexed": len(index),
            "files_found": len(files),
            FileOutcome.IMPORTED.value: 0,
            FileOutcome.SKIPPED_NO_JOIN.value: 0,
            FileOutcome.SKIPPED_EXISTING.value: 0,
            FileOutcome.FAILED.value: 0,
            "deliveries_written": 0,
            "deliveries_skipped": 0,
        }

        for path in files:
            result = self.import_file_safely(path, index)
            stats[result.outcome.value] += 1
            stats["deliveries_written"] += result.deliveries_written
            stats["deliveries_skipped"] += result.deliveries_skipped

        end_time = datetime.now()
        stats.update({
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
            "duration_seconds": (end_time - start_time).total_seconds(),
        })
        self.logger.info(
            f"Import finished: {stats['imported']}/{stats['files_found']} files imported, "
            f"{stats['skipped_existing']} already imported, {stats['skipped_no_join']} without match_info, "
            f"{stats['failed']} failed, {stats['deliveries_written']} deliveries written"
        )
        return stats

    def build_index(self) -> MatchInfoIndex:
        try:
            index = MatchInfoIndex.build(self.match_info_dir, logger=self.logger)
        except OSError as e:
            self.logger.error(f"Cannot read match_info directory {self.match_info_dir}: {e}")
            raise ImportSetupError(f"Cannot read match_info directory: {e}") from e
        self.logger.info(f"Loaded {len(index)} match_info records.")
        return index

    def discover_commentary_files(self) -> List[Path]:
        try:
            files = walk_json_files(self.commentary_dir)
        except OSError as e:
            self.logger.error(f"Cannot read commentary directory {self.commentary_dir}: {e}")
            raise ImportSetupError(f"Cannot read commentary directory: {e}") from e
        self.logger.info(f"Found {len(files)} innings commentary JSON files to process.")
        return files

    def check_connectivity(self) -> None:
        try:
            with session_scope(self.session_factory) as session:
                session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            self.logger.error(f"Database is not reachable: {e}")
            raise ImportSetupError(f"Database is not reachable: {e}") from e

    def import_file_safely(self, path: Path, index: MatchInfoIndex) -> FileResult:
        """Import one file, logging and swallowing per-file failures."""
        try:
            return self.import_file(path, index)
        except Exception as e:
            self.logger.error(f"Failed to import file {path}: {e}")
            return FileResult(FileOutcome.FAILED)

    def import_file(self, path: Union[str, Path], index: MatchInfoIndex) -> FileResult:
        """Import one innings commentary file inside a single transaction."""
        path = Path(path)
        try:
            document = CommentaryDocument.model_validate(read_json_document(path))
        except ValidationError as e:
            raise DocumentParseError(path, f"unexpected commentary document shape ({e.error_count()} errors)") from e

        info = index.get(JoinKey.from_commentary_path(path))
        if info is None:
            self.logger.warning(f"Skipping commentary file (no match_info join): {path.name}")
            return FileResult(FileOutcome.SKIPPED_NO_JOIN)

        external_key = info.external_key
        inning_number = to_int(document.inning.number if document.inning else None, 0)

        with session_scope(self.session_factory) as session:
            existing = self.loader.find_match(session, external_key)
            if existing is not None and self.loader.has_deliveries(session, existing.id):
                self.logger.info(f"Skipping {path.name}: match {external_key} already imported")
                return FileResult(FileOutcome.SKIPPED_EXISTING, external_key=external_key)

            match_data = self.build_match_data(session, info)
            batting_team_id, bowling_team_id = self.resolve_innings_teams(session, info, document)
            match, _ = self.loader.upsert_match(session, external_key, match_data)

            innings = InningsContext(
                match_id=match.id,
                inning_number=inning_number,
                batting_team_id=batting_team_id,
                bowling_team_id=bowling_team_id,
                roster=InningsContext.roster_from(document),
            )
            resolve_player = partial(self.resolver.resolve_player, session)

            written = skipped = 0
            for ball in document.commentaries or []:
                record = self.normalizer.normalize(ball, innings, resolve_player)
                if record is None:
                    skipped += 1
                    continue
                self.loader.upsert_delivery(session, record)
                written += 1

        self.logger.info(
            f"Imported {path.name}: match {external_key} innings {inning_number}, {written} deliveries"
        )
        return FileResult(
            FileOutcome.IMPORTED,
            external_key=external_key,
            deliveries_written=written,
            deliveries_skipped=skipped,
        )

    def build_match_data(self, session: Session, info: MatchInfo) -> Dict[str, Any]:
        """Resolve match-level references and map match-info fields to Match columns."""
        names = team_names_by_id(info)

        season_id = self.resolver.resolve_season(session, info.competition.season if info.competition else None)
        home_team_id = self.resolver.resolve_team(session, info.teama.name if info.teama else None)
        away_team_id = self.resolver.resolve_team(session, info.teamb.name if info.teamb else None)

        toss_winner_team_id = None
        toss_decision = None
        if info.toss is not None:
            toss_winner_name = names.get(to_int(info.toss.winner, 0))
            if toss_winner_name:
                toss_winner_team_id = self.resolver.resolve_team(session, toss_winner_name)
            toss_decision = TOSS_DECISIONS.get(to_int(info.toss.decision, 0))

        winner_team_id = None
        winner_name = names.get(to_int(info.winning_team_id, 0))
        if winner_name:
            winner_team_id = self.resolver.resolve_team(session, winner_name)

        umpire_1, umpire_2 = split_umpires(info.umpires)

        return {
            "season_id": season_id,
            "title": _optional_text(info.title),
            "home_team_id": home_team_id,
            "away_team_id": away_team_id,
            "match_date": parse_match_date(info),
            "venue": _optional_text(info.venue.name) if info.venue else None,
            "city": _optional_text(info.venue.location) if info.venue else None,
            "toss_winner_team_id": toss_winner_team_id,
            "toss_decision": toss_decision,
            "result_type": RESULT_TYPES.get(to_int(info.result_type, 0)),
            "winner_team_id": winner_team_id,
            "result_note": _optional_text(info.status_note),
            "dl_applied": str(info.match_dls_affected).strip().lower() == "true",
            "umpire_1": umpire_1,
            "umpire_2": umpire_2,
        }

    def resolve_innings_teams(self, session: Session, info: MatchInfo, document: CommentaryDocument) -> Tuple[int, int]:
        """Batting and bowling team ids, preferring match-info names over the commentary roster."""
        names = team_names_by_id(info)
        roster: Dict[int, str] = {}
        for team in document.teams or []:
            tid = to_int(team.tid, 0)
            if tid and tid not in roster:
                roster[tid] = team.title

        inning = document.inning
        batting_tid = to_int(inning.batting_team_id if inning else None, 0)
        bowling_tid = to_int(inning.fielding_team_id if inning else None, 0)

        batting_team_id = self.resolver.resolve_team(session, names.get(batting_tid) or roster.get(batting_tid))
        bowling_team_id = self.resolver.resolve_team(session, names.get(bowling_tid) or roster.get(bowling_tid))
        return batting_team_id, bowling_team_id


def run_import(data_root: Union[str, Path, None] = None, logger=None) -> Dict[str, Any]:
    """Run the import with configured settings and release the engine afterwards."""
    try:
        return ImportPipeline(data_root=data_root, logger=logger).run()
    finally:
        dispose_engine()
