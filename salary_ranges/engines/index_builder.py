# salary_ranges/engines/index_builder.py
"""
Builds the denormalized benchmark index: every configured region x every
family seen in its survey table x every named level, with internal pay
statistics merged in.

The index is assembled in a local structure and returned whole; callers
publish it with a single cache write, so a partially built index is never
visible.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

import pandas as pd

from salary_ranges.config.models import EngineSettings
from salary_ranges.data.headers import HeaderLookup
from salary_ranges.data.readers import RawTableAccessor
from salary_ranges.engines.internal import BucketKey, InternalStats, lookup_internal
from salary_ranges.engines.scan import EXEC_OVERRIDES
from salary_ranges.levels.codec import code_base, parse_code_token
from salary_ranges.levels.models import BenchmarkToken, LevelSpec
from salary_ranges.levels.table import LevelTable
from salary_ranges.mapping.families import FamilyLookup
from salary_ranges.utils import columns as C
from salary_ranges.utils.numeric import mean_of_present, normalize_text, round_to_step, to_number, to_text

logger = logging.getLogger(__name__)
index_logger = logging.getLogger("salary_ranges.index")
perf_logger = logging.getLogger("salary_ranges.performance")

MARKET_ROUNDING = 100
INTERNAL_ROUNDING = 1

Percentiles = Dict[str, Optional[float]]


class IndexKey(NamedTuple):
    """Structured lookup key; components never run into each other."""

    exec_family: str
    level: str
    region: str

    @classmethod
    def of(cls, exec_family: str, level: str, region: str) -> "IndexKey":
        return cls(normalize_text(exec_family), normalize_text(level), normalize_text(region))


@dataclass(frozen=True)
class IndexRow:
    site: str
    region: str
    code: str
    exec_family: str
    raw_family: str
    level: str
    token: str
    percentiles: Tuple[Optional[float], ...]
    internal: InternalStats = InternalStats.empty()

    @property
    def key(self) -> IndexKey:
        return IndexKey.of(self.exec_family, self.level, self.region)

    @property
    def dedup_key(self) -> Tuple[str, ...]:
        return tuple(normalize_text(v) for v in (self.site, self.region, self.code, self.exec_family, self.level))

    def percentile(self, label: str) -> Optional[float]:
        return self.percentiles[C.PERCENTILES.index(label)]

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            C.IDX_SITE: self.site,
            C.IDX_REGION: self.region,
            C.IDX_CODE: self.code,
            C.IDX_EXEC_FAMILY: self.exec_family,
            C.IDX_RAW_FAMILY: self.raw_family,
            C.IDX_LEVEL: self.level,
            C.IDX_TOKEN: self.token,
        }
        record.update(zip(C.PERCENTILES, self.percentiles))
        record.update(
            {
                C.IDX_INT_MIN: self.internal.min,
                C.IDX_INT_MEDIAN: self.internal.median,
                C.IDX_INT_MAX: self.internal.max,
                C.IDX_INT_COUNT: self.internal.count,
            }
        )
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "IndexRow":
        return cls(
            site=record[C.IDX_SITE],
            region=record[C.IDX_REGION],
            code=record[C.IDX_CODE],
            exec_family=record[C.IDX_EXEC_FAMILY],
            raw_family=record[C.IDX_RAW_FAMILY],
            level=record[C.IDX_LEVEL],
            token=record[C.IDX_TOKEN],
            percentiles=tuple(record[p] for p in C.PERCENTILES),
            internal=InternalStats(
                record[C.IDX_INT_MIN],
                record[C.IDX_INT_MEDIAN],
                record[C.IDX_INT_MAX],
                int(record[C.IDX_INT_COUNT]),
            ),
        )


class BenchmarkIndex:
    """Immutable snapshot of index rows with keyed lookup."""

    def __init__(self, rows: Iterable[IndexRow]):
        self._rows: Tuple[IndexRow, ...] = tuple(rows)
        self._by_key: Dict[IndexKey, IndexRow] = {}
        for row in self._rows:
            self._by_key.setdefault(row.key, row)

    @property
    def rows(self) -> Tuple[IndexRow, ...]:
        return self._rows

    def get(self, exec_family: str, level: str, region: str) -> Optional[IndexRow]:
        return self._by_key.get(IndexKey.of(exec_family, level, region))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([row.to_record() for row in self._rows], columns=C.INDEX_COLUMNS)

    def to_payload(self) -> List[Dict[str, Any]]:
        return [row.to_record() for row in self._rows]

    @classmethod
    def from_payload(cls, payload: List[Dict[str, Any]]) -> "BenchmarkIndex":
        return cls(IndexRow.from_record(record) for record in payload)

    def __len__(self) -> int:
        return len(self._rows)


@dataclass
class RegionBenchmarks:
    """One pass over a region's survey table."""

    region: str
    table: str
    values: Dict[Tuple[str, str], Percentiles] = field(default_factory=dict)
    descriptions: Dict[str, str] = field(default_factory=dict)
    bases: List[str] = field(default_factory=list)


def scan_region_table(
    df: pd.DataFrame, region: str, table: str, settings: EngineSettings, headers: HeaderLookup
) -> RegionBenchmarks:
    """Map (family base, token) -> percentiles and family base -> description.

    Raises:
        MissingColumnError: If the code, family or a required percentile column is missing.
    """
    cols = settings.columns
    code_col = headers.column(table, df, cols.job_code, label=C.JOB_CODE)
    family_col = headers.column(table, df, cols.job_family, label=C.JOB_FAMILY)
    pct_cols: Dict[str, Optional[str]] = {}
    for label in C.PERCENTILES:
        required = label in C.REQUIRED_PERCENTILES
        pct_cols[label] = headers.column(table, df, C.percentile_pattern(label), required=required, label=label)

    bench = RegionBenchmarks(region=region, table=table)
    for _, row in df.iterrows():
        token = parse_code_token(row[code_col])
        base = normalize_text(code_base(row[code_col]))
        if token is None or not base:
            continue
        if base not in bench.descriptions:
            bench.bases.append(base)
            bench.descriptions[base] = " ".join(to_text(row[family_col]).split())
        key = (base, str(token))
        if key in bench.values:
            continue
        bench.values[key] = {
            label: (to_number(row[col]) if col is not None else None) for label, col in pct_cols.items()
        }
    logger.debug("Region %s: %d families, %d token rows", region, len(bench.bases), len(bench.values))
    return bench


def alternate_tokens(token: BenchmarkToken, is_finance: bool) -> List[str]:
    """Token spellings tried in order when the mapped token has no row."""
    candidates = [str(token)]
    if is_finance and token.letter == "P" and token.number is not None:
        candidates.append(f"F{token.number}")
    if token.letter == "E":
        candidates.extend(letter for letter, numbers in EXEC_OVERRIDES.items() if token.number in numbers)
    return candidates


def _present(values: Optional[Percentiles]) -> bool:
    return values is not None and any(v is not None for v in values.values())


class IndexBuilder:
    """Owns construction of the benchmark index; consumers only read its output."""

    def __init__(
        self,
        settings: EngineSettings,
        tables: RawTableAccessor,
        lookup: FamilyLookup,
        level_table: LevelTable,
        internal_index: Dict[BucketKey, InternalStats],
    ):
        self.settings = settings
        self.tables = tables
        self.lookup = lookup
        self.level_table = level_table
        self.internal_index = internal_index

    def token_values(
        self, bench: RegionBenchmarks, base: str, token: Optional[BenchmarkToken], is_finance: bool
    ) -> Tuple[str, Optional[Percentiles]]:
        if token is None:
            return "", None
        for candidate in alternate_tokens(token, is_finance):
            values = bench.values.get((base, candidate))
            if _present(values):
                return candidate, values
        return str(token), None

    def level_values(
        self, bench: RegionBenchmarks, base: str, level: LevelSpec, is_finance: bool
    ) -> Tuple[str, Optional[Percentiles]]:
        """Percentiles for one level; a half level averages its floor and ceiling."""
        if not level.is_half:
            return self.token_values(bench, base, self.level_table.token_for(level), is_finance)

        low_token, low = self.token_values(bench, base, self.level_table.token_for(level.floor_level()), is_finance)
        high_token, high = self.token_values(bench, base, self.level_table.token_for(level.ceil_level()), is_finance)
        if low is None and high is None:
            return "", None
        merged = {
            label: mean_of_present([(low or {}).get(label), (high or {}).get(label)]) for label in C.PERCENTILES
        }
        return "/".join(t for t in (low_token, high_token) if t), merged

    def exec_family_for(self, base: str) -> str:
        return self.lookup.exec_family_for_code(base) or base

    def internal_for(self, region: str, exec_family: str, base: str, level: str) -> InternalStats:
        stats = lookup_internal(self.internal_index, region, exec_family, level)
        if stats is None:
            stats = lookup_internal(self.internal_index, region, base, level)
        if stats is None:
            return InternalStats.empty()
        return InternalStats(
            round_to_step(stats.min, INTERNAL_ROUNDING),
            round_to_step(stats.median, INTERNAL_ROUNDING),
            round_to_step(stats.max, INTERNAL_ROUNDING),
            stats.count,
        )

    def build_region(self, region: str, headers: HeaderLookup) -> List[IndexRow]:
        table = self.settings.region_tables[region]
        bench = scan_region_table(self.tables.get_table(table), region, table, self.settings, headers)
        rows: List[IndexRow] = []
        for base in bench.bases:
            is_finance = self.lookup.matches_prefixes(base, self.settings.finance_prefixes)
            exec_family = self.exec_family_for(base)
            code = normalize_text(self.lookup.aliases.resolve_forward(base))
            for entry in self.level_table.entries:
                token, values = self.level_values(bench, base, entry.level, is_finance)
                if not _present(values):
                    continue
                rows.append(
                    IndexRow(
                        site=region,
                        region=region,
                        code=code,
                        exec_family=exec_family,
                        raw_family=bench.descriptions.get(base, ""),
                        level=entry.name,
                        token=token,
                        percentiles=tuple(round_to_step(values.get(p), MARKET_ROUNDING) for p in C.PERCENTILES),
                        internal=self.internal_for(region, exec_family, base, entry.name),
                    )
                )
        return rows

    def build(self) -> BenchmarkIndex:
        started = time.perf_counter()
        headers = HeaderLookup()
        working: List[IndexRow] = []
        seen = set()
        duplicates = 0
        for region in self.settings.region_tables:
            for row in self.build_region(region, headers):
                if row.dedup_key in seen:
                    duplicates += 1
                    continue
                seen.add(row.dedup_key)
                working.append(row)
        index = BenchmarkIndex(working)
        index_logger.info(
            "Built benchmark index: %d rows across %d regions (%d duplicates discarded)",
            len(index),
            len(self.settings.region_tables),
            duplicates,
        )
        perf_logger.info("Index build took %.3fs", time.perf_counter() - started)
        return index
