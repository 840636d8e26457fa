# salary_ranges/engines/scan.py
"""
Live-scan percentile lookup against a single survey table.

The scan walks rows top to bottom and stops at the first row that matches
and carries a numeric percentile cell. Row order is therefore part of the
contract: survey tables list the preferred row for a level first.
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from salary_ranges.cache.service import CachePrefix, CacheService
from salary_ranges.cache.ttl import MISSING
from salary_ranges.config.models import EngineSettings
from salary_ranges.data.headers import HeaderLookup
from salary_ranges.data.readers import RawTableAccessor, TableSnapshots
from salary_ranges.levels.codec import code_base, parse_code_token
from salary_ranges.levels.models import BenchmarkToken, LevelSpec
from salary_ranges.mapping.families import FamilyLookup
from salary_ranges.utils.columns import percentile_pattern
from salary_ranges.utils.numeric import mean_of_present, normalize_text, to_number

logger = logging.getLogger(__name__)

# Executive band tokens that cover two exec numbers each
EXEC_OVERRIDES: Dict[str, Tuple[int, ...]] = {"EA": (3, 4), "EB": (1, 2)}


def token_matches(
    token: Optional[BenchmarkToken],
    target_level: int,
    preferred_letter: str,
    is_finance: bool,
    exec_threshold: int = 7,
    exec_offset: int = 6,
) -> bool:
    """Whether a survey row's token stands for ``target_level``.

    Executive levels (``target_level >= exec_threshold``) compare against the
    exec number ``target_level - exec_offset``: ``E<n>`` matches exactly,
    ``EA`` covers 3 and 4, ``EB`` covers 1 and 2. Below the threshold the
    number must equal the level and the letter the preferred one; finance
    families also accept ``F`` in place of ``P``.
    """
    if token is None:
        return False
    if target_level >= exec_threshold:
        exec_number = target_level - exec_offset
        if token.letter == "E" and token.number == exec_number:
            return True
        return exec_number in EXEC_OVERRIDES.get(token.letter, ())
    if token.number != target_level:
        return False
    if token.letter == preferred_letter:
        return True
    return preferred_letter == "P" and is_finance and token.letter == "F"


class ScanResolver:
    """Strict linear-scan resolver with code-alias fallback."""

    def __init__(
        self,
        tables: RawTableAccessor,
        settings: EngineSettings,
        lookup: Callable[[], FamilyLookup],
        cache: CacheService,
    ):
        self.tables = tables
        self.settings = settings
        self._lookup = lookup
        self.cache = cache

    def is_finance(self, family: str) -> bool:
        return self._lookup().matches_prefixes(family, self.settings.finance_prefixes)

    def resolve_value(
        self,
        table: str,
        family_code: str,
        target_level: int,
        preferred_letter: str,
        header_pattern: str,
        headers: Optional[HeaderLookup] = None,
        snapshots: Optional[TableSnapshots] = None,
    ) -> Optional[float]:
        """Single strict attempt for one family code; None when nothing matches.

        Raises:
            MissingColumnError: If the family, code or percentile column is missing.
        """
        headers = headers or HeaderLookup()
        cols = self.settings.columns
        df = (snapshots or self.tables).get_table(table)
        family_col = headers.column(table, df, cols.job_family, label="Job Family")
        code_col = headers.column(table, df, cols.job_code, label="Job Code")
        value_col = headers.column(table, df, header_pattern, label=header_pattern)

        wanted = normalize_text(family_code)
        if not wanted:
            return None
        is_finance = self.is_finance(family_code)
        for family, code, cell in zip(df[family_col], df[code_col], df[value_col]):
            if normalize_text(family) != wanted and normalize_text(code_base(code)) != wanted:
                continue
            token = parse_code_token(code)
            if not token_matches(
                token,
                target_level,
                preferred_letter,
                is_finance,
                self.settings.exec_level_threshold,
                self.settings.exec_number_offset,
            ):
                continue
            value = to_number(cell)
            if value is not None:
                return value
        return None

    def resolve_with_aliases(
        self,
        table: str,
        family_code: str,
        target_level: int,
        preferred_letter: str,
        header_pattern: str,
        headers: Optional[HeaderLookup] = None,
        snapshots: Optional[TableSnapshots] = None,
    ) -> Optional[float]:
        """Try the code as given, then its forward alias, then its reverse alias."""
        cache_parts = (table, normalize_text(family_code), target_level, preferred_letter, header_pattern)
        cached = self.cache.get(CachePrefix.BENCH_VALUE, *cache_parts)
        if cached is not MISSING:
            return cached

        headers = headers or HeaderLookup()
        snapshots = snapshots or TableSnapshots(self.tables)
        aliases = self._lookup().aliases
        attempts = [family_code, aliases.resolve_forward(family_code), aliases.resolve_reverse(family_code)]
        value = None
        tried = set()
        for attempt in attempts:
            key = normalize_text(attempt)
            if key in tried:
                continue
            tried.add(key)
            value = self.resolve_value(
                table, attempt, target_level, preferred_letter, header_pattern, headers, snapshots
            )
            if value is not None:
                break

        self.cache.put(CachePrefix.BENCH_VALUE, cache_parts, value)
        return value

    def resolve_level(
        self,
        table: str,
        family_code: str,
        level: LevelSpec,
        percentile: str,
        headers: Optional[HeaderLookup] = None,
        snapshots: Optional[TableSnapshots] = None,
    ) -> Optional[float]:
        """Percentile for an internal level; half levels average their neighbours."""
        headers = headers or HeaderLookup()
        snapshots = snapshots or TableSnapshots(self.tables)
        pattern = percentile_pattern(percentile)
        letter = level.role.preferred_letter
        if not level.is_half:
            return self.resolve_with_aliases(table, family_code, level.floor, letter, pattern, headers, snapshots)
        low = self.resolve_with_aliases(table, family_code, level.floor, letter, pattern, headers, snapshots)
        high = self.resolve_with_aliases(table, family_code, level.ceil, letter, pattern, headers, snapshots)
        return mean_of_present([low, high])
