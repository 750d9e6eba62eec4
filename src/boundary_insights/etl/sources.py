"""Raw record discovery and parsing for the on-disk match dataset.

Layout under the data root (fixed):

- ``match_info/<BASENAME>_info.json``: one metadata document per match
- ``match_innings_commentary/innings_<N>_<BASENAME>_match_innings_<N>_commentary.json``:
  one ball-by-ball document per match innings

``<BASENAME>`` is the only link between the two; :class:`JoinKey` is the
single place that knows how to read it out of a filename.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from ..exceptions import DocumentParseError


MATCH_INFO_DIR = "match_info"
COMMENTARY_DIR = "match_innings_commentary"

_MATCH_INFO_SUFFIX = re.compile(r"_info\.json$", re.IGNORECASE)
_COMMENTARY_NAME = re.compile(
    r"^innings_\d+_(?P<base>.+)_match_innings_\d+_commentary\.json$", re.IGNORECASE
)


@dataclass(frozen=True)
class JoinKey:
    """Filename fragment shared by a match-info file and its commentary files."""

    basename: str

    @classmethod
    def from_match_info_path(cls, path: Union[str, Path]) -> Optional["JoinKey"]:
        name = Path(path).name
        if not _MATCH_INFO_SUFFIX.search(name):
            return None
        base = _MATCH_INFO_SUFFIX.sub("", name)
        return cls(base) if base else None

    @classmethod
    def from_commentary_path(cls, path: Union[str, Path]) -> Optional["JoinKey"]:
        match = _COMMENTARY_NAME.match(Path(path).name)
        return cls(match.group("base")) if match else None

    def __str__(self) -> str:
        return self.basename


def walk_json_files(root: Union[str, Path]) -> List[Path]:
    """Recursively list every ``.json`` file under ``root``.

    Raises ``FileNotFoundError``/``NotADirectoryError`` when ``root`` cannot be listed.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    files = [p for p in root.rglob("*") if p.is_file() and p.name.lower().endswith(".json")]
    return sorted(files)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def read_json_document(path: Union[str, Path]) -> Any:
    """Read and strictly parse one JSON file.

    ``NaN``, ``Infinity`` and ``-Infinity`` are rejected like any other syntax error.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise DocumentParseError(path, f"invalid JSON at line {e.lineno} column {e.colno}") from e
    except (OSError, ValueError) as e:
        # ValueError covers UnicodeDecodeError and rejected constants
        raise DocumentParseError(path, str(e)) from e
