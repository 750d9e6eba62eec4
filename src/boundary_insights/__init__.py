"""Boundary Insights - cricket match ingestion package."""

from .config import settings
from .database import get_database_engine, get_session

__all__ = ["settings", "get_database_engine", "get_session"]
