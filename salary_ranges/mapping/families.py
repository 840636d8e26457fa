import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from salary_ranges.config.models import ColumnPatterns
from salary_ranges.data.headers import find_column
from salary_ranges.utils.numeric import normalize_text

from .aliases import AliasTable

logger = logging.getLogger(__name__)


def matches_prefix(code: str, prefixes: Sequence[str]) -> bool:
    """True if ``code`` starts with any of ``prefixes`` (case-insensitive)."""
    text = normalize_text(code)
    return any(text.startswith(normalize_text(p)) for p in prefixes if p)


class ExecFamilyMap:
    """Family code -> human-readable exec family name. First row per code wins."""

    def __init__(self, pairs: Iterable[Tuple[str, str]] = ()):
        self._by_code: Dict[str, str] = {}
        for code, name in pairs:
            code_key = normalize_text(code)
            if not code_key or not normalize_text(name):
                continue
            self._by_code.setdefault(code_key, " ".join(str(name).split()))

    @classmethod
    def from_frame(cls, df: pd.DataFrame, columns: ColumnPatterns, table: str = "exec") -> "ExecFamilyMap":
        code_col = find_column(df, columns.exec_code, table=table, label="Code")
        name_col = find_column(df, columns.exec_family, table=table, label="Exec Family")
        return cls(zip(df[code_col], df[name_col]))

    def get(self, code: str) -> Optional[str]:
        return self._by_code.get(normalize_text(code))

    def to_records(self) -> List[List[str]]:
        return [[c, n] for c, n in self._by_code.items()]

    @classmethod
    def from_records(cls, records: Iterable[Iterable[str]]) -> "ExecFamilyMap":
        return cls((tuple(r) for r in records))

    def __len__(self) -> int:
        return len(self._by_code)


class FamilyLookup:
    """Lookup map read on every resolution: code <-> exec family name.

    Built from the alias table and the exec family map. A code is described
    by its own exec entry, else its forward alias's, else its reverse alias's.
    """

    def __init__(self, aliases: AliasTable, exec_map: ExecFamilyMap):
        self.aliases = aliases
        self.exec_map = exec_map
        self._codes_by_family: Dict[str, List[str]] = {}
        self._family_names: Dict[str, str] = {}
        known_codes: List[str] = [code for code, _ in exec_map.to_records()]
        for from_code, to_code in aliases.to_records():
            known_codes.extend([normalize_text(from_code), normalize_text(to_code)])
        for code in known_codes:
            name = self.exec_family_for_code(code)
            if name is None:
                continue
            key = normalize_text(name)
            self._family_names.setdefault(key, name)
            codes = self._codes_by_family.setdefault(key, [])
            if code not in codes:
                codes.append(code)

    def exec_family_for_code(self, code: str) -> Optional[str]:
        for candidate in self.aliases.synonyms(code):
            name = self.exec_map.get(candidate)
            if name:
                return name
        return None

    def is_family_name(self, text: str) -> bool:
        return normalize_text(text) in self._codes_by_family

    def exec_family(self, family_or_code: str) -> str:
        """Exec family name for a code or a name; unknown input is returned stripped."""
        key = normalize_text(family_or_code)
        if key in self._family_names:
            return self._family_names[key]
        name = self.exec_family_for_code(family_or_code)
        return name if name else " ".join(str(family_or_code).split())

    def codes_for(self, family_or_code: str) -> List[str]:
        """Codes mapped to an exec family name, or ``[code]`` for a code."""
        key = normalize_text(family_or_code)
        if key in self._codes_by_family:
            return list(self._codes_by_family[key])
        return [" ".join(str(family_or_code).split()).upper()] if key else []

    def matches_prefixes(self, family_or_code: str, prefixes: Sequence[str]) -> bool:
        """Prefix test on the input itself or on any code mapped to its exec family."""
        if matches_prefix(family_or_code, prefixes):
            return True
        family = self.exec_family(family_or_code)
        return any(matches_prefix(code, prefixes) for code in self.codes_for(family))
