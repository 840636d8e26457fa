import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from salary_ranges.config.models import ColumnPatterns
from salary_ranges.data.headers import find_column

from .codec import parse_level, parse_token
from .models import BenchmarkToken, LevelSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelEntry:
    """One named level and the survey token it maps to (None for half levels)."""

    level: LevelSpec
    token: Optional[BenchmarkToken]

    @property
    def name(self) -> str:
        return self.level.name


class LevelTable:
    """Ordered level -> token mapping keyed by canonical level name."""

    def __init__(self, entries: List[LevelEntry]):
        self._entries: List[LevelEntry] = []
        self._by_name: Dict[str, LevelEntry] = {}
        for entry in entries:
            if entry.name in self._by_name:
                logger.debug("Duplicate level '%s' ignored", entry.name)
                continue
            self._by_name[entry.name] = entry
            self._entries.append(entry)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, columns: ColumnPatterns, table: str = "levels") -> "LevelTable":
        level_col = find_column(df, columns.level, table=table, label="Level")
        token_col = find_column(df, columns.token, table=table, label="Token")
        entries: List[LevelEntry] = []
        for raw_level, raw_token in zip(df[level_col], df[token_col]):
            spec = parse_level(raw_level)
            if spec is None:
                logger.debug("Skipping unparsable level '%s' in table '%s'", raw_level, table)
                continue
            token = parse_token(raw_token) if isinstance(raw_token, str) and raw_token.strip() else None
            entries.append(LevelEntry(spec, token))
        logger.info("Loaded %d levels from table '%s'", len(entries), table)
        return cls(entries)

    @property
    def entries(self) -> List[LevelEntry]:
        return list(self._entries)

    def token_for(self, level: LevelSpec) -> Optional[BenchmarkToken]:
        entry = self._by_name.get(level.name)
        return entry.token if entry else None

    def __contains__(self, level: LevelSpec) -> bool:
        return level.name in self._by_name

    def __len__(self) -> int:
        return len(self._entries)
