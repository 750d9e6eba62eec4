"""Ingestion pipeline for match metadata and ball-by-ball commentary."""

from .pipeline import ImportPipeline, FileOutcome, run_import
from .match_index import MatchInfoIndex
from .resolver import EntityResolver
from .transformers import DeliveryNormalizer
from .loaders import DatabaseLoader
from .quality_checks import DataQualityChecker

__all__ = [
    "ImportPipeline",
    "FileOutcome",
    "run_import",
    "MatchInfoIndex",
    "EntityResolver",
    "DeliveryNormalizer",
    "DatabaseLoader",
    "DataQualityChecker",
]
