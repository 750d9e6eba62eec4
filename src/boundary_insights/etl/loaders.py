"""Database writes for matches and deliveries with idempotent upserts."""

from typing import Any, Dict, Optional, Tuple

from loguru import logger as default_logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import DeliveryRecord
from ..models import Delivery, Match


class DatabaseLoader:
    """Match and delivery persistence keyed by natural keys."""

    def __init__(self, logger=None):
        self.logger = logger or default_logger

    def find_match(self, session: Session, external_key: str) -> Optional[Match]:
        """Find a match by its source key."""
        return session.execute(
            select(Match).where(Match.external_key == external_key)
        ).scalar_one_or_none()

    def has_deliveries(self, session: Session, match_id: int) -> bool:
        """Check whether a match has any deliveries stored."""
        query = select(Delivery.id).where(Delivery.match_id == match_id).limit(1)
        return session.execute(query).first() is not None

    def upsert_match(self, session: Session, external_key: str, match_data: Dict[str, Any]) -> Tuple[Match, str]:
        """Upsert match data by external key; returns the row and "inserted" or "updated"."""
        existing_match = self.find_match(session, external_key)

        if existing_match:
            # Update existing match
            for key, value in match_data.items():
                if hasattr(existing_match, key):
                    setattr(existing_match, key, value)
            session.flush()
            return existing_match, "updated"

        # Insert new match
        match = Match(external_key=external_key, **match_data)
        session.add(match)
        session.flush()
        self.logger.debug(f"Created match {external_key} (id={match.id})")
        return match, "inserted"

    def upsert_delivery(self, session: Session, record: DeliveryRecord) -> str:
        """Upsert one delivery by (match, inning, over, ball); returns "inserted" or "updated"."""
        ball_data = record.model_dump()
        existing_ball = session.execute(
            select(Delivery).where(
                (Delivery.match_id == record.match_id) &
                (Delivery.inning_number == record.inning_number) &
                (Delivery.over_number == record.over_number) &
                (Delivery.ball_in_over == record.ball_in_over)
            )
        ).scalar_one_or_none()

        if existing_ball:
            # Update existing ball in place
            for key, value in ball_data.items():
                setattr(existing_ball, key, value)
            session.flush()
            return "updated"

        # Insert new ball; flush so a repeated key later in the same file updates this row
        session.add(Delivery(**ball_data))
        session.flush()
        return "inserted"
