"""In-memory index of match metadata keyed by filename join key."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from loguru import logger as default_logger
from pydantic import ValidationError

from .models import MatchInfo
from .sources import JoinKey, read_json_document, walk_json_files
from ..exceptions import DocumentParseError


class MatchInfoIndex:
    """Read-only mapping of :class:`JoinKey` to parsed :class:`MatchInfo`.

    Built once per run from the match-info directory and never mutated after.
    """

    def __init__(self, entries: Dict[JoinKey, MatchInfo]):
        self._entries = dict(entries)

    @classmethod
    def build(cls, directory: Union[str, Path], logger=None) -> "MatchInfoIndex":
        """Scan ``directory`` and index every document that has a numeric ``match_id``.

        Unreadable or malformed files are skipped. Listing the directory itself is
        allowed to raise; the caller treats that as fatal.
        """
        log = logger or default_logger
        entries: Dict[JoinKey, MatchInfo] = {}
        skipped = 0

        for path in walk_json_files(directory):
            key = JoinKey.from_match_info_path(path)
            if key is None:
                skipped += 1
                continue
            try:
                info = MatchInfo.model_validate(read_json_document(path))
            except (DocumentParseError, ValidationError) as e:
                log.debug(f"Ignoring match_info file {path.name}: {e}")
                skipped += 1
                continue
            if not info.has_numeric_match_id:
                skipped += 1
                continue
            if key in entries:
                log.warning(f"Duplicate match_info join key {key}; keeping {path.name}")
            entries[key] = info

        log.info(f"Indexed {len(entries)} match_info records ({skipped} skipped)")
        return cls(entries)

    def get(self, key: Optional[JoinKey]) -> Optional[MatchInfo]:
        if key is None:
            return None
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[JoinKey]:
        return iter(self._entries)
