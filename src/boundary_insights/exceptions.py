"""Exception types raised by the ingestion pipeline."""

from pathlib import Path
from typing import Union


class IngestionError(Exception):
    """Base exception for ingestion errors."""
    pass


class DocumentParseError(IngestionError):
    """A source JSON document could not be read or parsed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path.name}: {reason}")


class ImportSetupError(IngestionError):
    """The import cannot start (missing data directories, unreachable database)."""
    pass
