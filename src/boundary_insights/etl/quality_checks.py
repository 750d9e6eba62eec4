"""Data quality checks over the imported schema."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from loguru import logger as default_logger
from sqlalchemy import select, func
from sqlalchemy.orm import Session, sessionmaker

from ..database import get_session_local, session_scope
from ..models import (
    Delivery, Match, Player, Team,
    UNKNOWN_PLAYER_NAME, UNKNOWN_TEAM_NAME,
)


class DataQualityChecker:
    """Report known weak spots of the import: duplicate players, placeholders, empty matches."""

    def __init__(self, session_factory: Optional[sessionmaker] = None, logger=None):
        self.session_factory = session_factory or get_session_local()
        self.logger = logger or default_logger

    def check_data_quality(self) -> Dict[str, Any]:
        """Run all checks and return their issues plus an overall score."""
        self.logger.info("Running data quality checks")

        results: Dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "checks": {}
        }

        with session_scope(self.session_factory) as session:
            results["checks"]["players"] = self._check_players_quality(session)
            results["checks"]["teams"] = self._check_teams_quality(session)
            results["checks"]["matches"] = self._check_matches_quality(session)
            results["checks"]["deliveries"] = self._check_deliveries_quality(session)

        results["overall_score"] = self._calculate_quality_score(results["checks"])

        self.logger.info(f"Data quality check completed. Overall score: {results['overall_score']}")
        return results

    def _check_players_quality(self, session: Session) -> Dict[str, Any]:
        """Duplicate player names come from concurrent imports racing on get-or-create."""
        issues = []
        total_players = session.execute(select(func.count(Player.id))).scalar_one()

        duplicate_names = session.execute(
            select(Player.name, func.count(Player.id))
            .group_by(Player.name)
            .having(func.count(Player.id) > 1)
        ).all()

        if duplicate_names:
            issues.append({
                "type": "duplicate_names",
                "count": len(duplicate_names),
                "details": [{"name": name, "count": count} for name, count in duplicate_names]
            })

        return {
            "total_players": total_players,
            "issues": issues,
            "quality_score": self._score(total_players, sum(d["count"] for d in issues)),
        }

    def _check_teams_quality(self, session: Session) -> Dict[str, Any]:
        issues = []
        total_teams = session.execute(select(func.count(Team.id))).scalar_one()

        placeholder = session.execute(
            select(func.count(Match.id))
            .join(Team, (Team.id == Match.home_team_id) | (Team.id == Match.away_team_id))
            .where(Team.name == UNKNOWN_TEAM_NAME)
        ).scalar_one()

        if placeholder:
            issues.append({
                "type": "unknown_team_in_matches",
                "count": placeholder,
                "details": f"{placeholder} match sides fell back to '{UNKNOWN_TEAM_NAME}'"
            })

        return {
            "total_teams": total_teams,
            "issues": issues,
            "quality_score": self._score(total_teams, sum(d["count"] for d in issues)),
        }

    def _check_matches_quality(self, session: Session) -> Dict[str, Any]:
        issues = []
        total_matches = session.execute(select(func.count(Match.id))).scalar_one()

        empty_matches = session.execute(
            select(Match.external_key)
            .outerjoin(Delivery, Delivery.match_id == Match.id)
            .group_by(Match.id, Match.external_key)
            .having(func.count(Delivery.id) == 0)
        ).scalars().all()

        if empty_matches:
            issues.append({
                "type": "matches_without_deliveries",
                "count": len(empty_matches),
                "details": list(empty_matches)
            })

        return {
            "total_matches": total_matches,
            "issues": issues,
            "quality_score": self._score(total_matches, sum(d["count"] for d in issues)),
        }

    def _check_deliveries_quality(self, session: Session) -> Dict[str, Any]:
        issues = []
        total_balls = session.execute(select(func.count(Delivery.id))).scalar_one()

        negative_extras = session.execute(
            select(func.count(Delivery.id)).where(Delivery.runs_extras < 0)
        ).scalar_one()
        if negative_extras:
            issues.append({
                "type": "negative_extras",
                "count": negative_extras,
                "details": "deliveries with runs_extras below zero"
            })

        unknown_player_ids = select(Player.id).where(Player.name == UNKNOWN_PLAYER_NAME)
        unknown_striker = session.execute(
            select(func.count(Delivery.id)).where(
                Delivery.striker_id.in_(unknown_player_ids) | Delivery.bowler_id.in_(unknown_player_ids)
            )
        ).scalar_one()
        if unknown_striker:
            issues.append({
                "type": "unknown_player_on_delivery",
                "count": unknown_striker,
                "details": f"deliveries whose striker or bowler is '{UNKNOWN_PLAYER_NAME}'"
            })

        return {
            "total_balls": total_balls,
            "issues": issues,
            "quality_score": self._score(total_balls, sum(d["count"] for d in issues)),
        }

    @staticmethod
    def _score(total: int, issue_count: int) -> int:
        if total == 0:
            return 100
        return max(0, round(100 * (1 - issue_count / total)))

    @staticmethod
    def _calculate_quality_score(checks: Dict[str, Dict[str, Any]]) -> int:
        scores: List[int] = [c["quality_score"] for c in checks.values() if "quality_score" in c]
        if not scores:
            return 100
        return round(sum(scores) / len(scores))
