# salary_ranges/mapping/aliases.py
"""
Job-family code remapping.

Survey vendors rename family codes between vintages; the alias table records
``from -> to`` pairs so a code can be looked up under either spelling.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from salary_ranges.config.models import ColumnPatterns
from salary_ranges.data.headers import find_column
from salary_ranges.utils.numeric import normalize_text

logger = logging.getLogger(__name__)


def _clean(code) -> str:
    return normalize_text(code)


class AliasTable:
    """Forward/reverse code aliases.

    The built-in default pair is loaded first, then external rows in table
    order; a later row for the same ``from`` code replaces the earlier one.
    """

    def __init__(self, entries: Iterable[Tuple[str, str]] = (), default: Optional[Tuple[str, str]] = None):
        self._forward: Dict[str, str] = {}
        if default is not None:
            self._set(*default)
        for from_code, to_code in entries:
            self._set(from_code, to_code)

    def _set(self, from_code, to_code) -> None:
        from_code, to_code = _clean(from_code), _clean(to_code)
        if not from_code or not to_code:
            return
        if from_code in self._forward and self._forward[from_code] != to_code:
            logger.debug("Alias %s -> %s overrides %s", from_code, to_code, self._forward[from_code])
        self._forward[from_code] = to_code

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        columns: ColumnPatterns,
        default: Optional[Tuple[str, str]] = None,
        table: str = "aliases",
    ) -> "AliasTable":
        from_col = find_column(df, columns.alias_from, table=table, label="From Code")
        to_col = find_column(df, columns.alias_to, table=table, label="To Code")
        return cls(zip(df[from_col], df[to_col]), default=default)

    def resolve_forward(self, code: str) -> str:
        """Mapped code, or the input unchanged when it has no alias."""
        return self._forward.get(_clean(code), code)

    def resolve_reverse(self, code: str) -> str:
        """First ``from`` code (table order) whose target is ``code``, else the input."""
        wanted = _clean(code)
        for from_code, to_code in self._forward.items():
            if to_code == wanted:
                return from_code
        return code

    def synonyms(self, code: str) -> List[str]:
        """``code``, its forward alias and its reverse alias, duplicates removed, in that order."""
        result: List[str] = []
        for candidate in (code, self.resolve_forward(code), self.resolve_reverse(code)):
            candidate = _clean(candidate)
            if candidate and candidate not in result:
                result.append(candidate)
        return result

    def to_records(self) -> List[List[str]]:
        return [[f, t] for f, t in self._forward.items()]

    @classmethod
    def from_records(cls, records: Iterable[Iterable[str]]) -> "AliasTable":
        return cls((tuple(r) for r in records))

    def __len__(self) -> int:
        return len(self._forward)

    def __eq__(self, other) -> bool:
        return isinstance(other, AliasTable) and self.to_records() == other.to_records()
