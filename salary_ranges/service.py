# salary_ranges/service.py
"""
Public query API for salary ranges and internal pay statistics.

``resolve_range`` answers from the precomputed benchmark index and falls back
to a live scan of the survey table for families the index does not cover.
Data misses come back as ``None`` components; only configuration errors
raise.
"""

import logging
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple, Union

from salary_ranges.cache.service import CachePrefix, CacheService
from salary_ranges.cache.ttl import MISSING, CacheEntry
from salary_ranges.config.models import EngineSettings
from salary_ranges.data.headers import HeaderLookup
from salary_ranges.data.readers import RawTableAccessor, TableSnapshots
from salary_ranges.data.sources import TableSource
from salary_ranges.engines.bands import band_percentiles, effective_band
from salary_ranges.engines.index_builder import MARKET_ROUNDING, BenchmarkIndex, IndexBuilder
from salary_ranges.engines.internal import (
    InternalPayRecord,
    InternalStats,
    build_internal_index,
    filter_stats,
    load_internal_records,
)
from salary_ranges.engines.scan import ScanResolver
from salary_ranges.exceptions import MissingTableError
from salary_ranges.levels.codec import parse_level
from salary_ranges.levels.table import LevelTable
from salary_ranges.mapping.aliases import AliasTable
from salary_ranges.mapping.families import ExecFamilyMap, FamilyLookup
from salary_ranges.utils.numeric import round_to_step, to_text

logger = logging.getLogger(__name__)

INDEX_KEY = ("benchmark",)


class RangeResult(NamedTuple):
    min: Optional[float]
    mid: Optional[float]
    max: Optional[float]

    @classmethod
    def empty(cls) -> "RangeResult":
        return cls(None, None, None)

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.mid is None and self.max is None


class BenchmarkService:
    """Facade over the index builder, scan resolver and internal pay aggregation.

    Args:
        source: Provider of raw tables by name
        settings: Engine settings (defaults when omitted)
        cache: Shared cache service; one is created from the settings TTL if omitted
    """

    def __init__(
        self,
        source: TableSource,
        settings: Optional[EngineSettings] = None,
        cache: Optional[CacheService] = None,
    ):
        self.settings = settings or EngineSettings()
        self.cache = cache or CacheService(ttl_seconds=self.settings.cache_ttl_seconds)
        self.tables = RawTableAccessor(source, self.cache)
        self.scanner = ScanResolver(self.tables, self.settings, self.family_lookup, self.cache)
        self.index_builds = 0
        # Decoded objects, valid while the cache entry they were decoded from is live
        self._index_memo: Optional[Tuple[CacheEntry, BenchmarkIndex]] = None
        self._records_memo: Optional[Tuple[CacheEntry, List[InternalPayRecord]]] = None

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def _optional_table(self, name: str):
        try:
            return self.tables.get_table(name)
        except MissingTableError:
            logger.warning("Optional table '%s' not found; treating it as empty", name)
            return None

    def alias_table(self) -> AliasTable:
        name = self.settings.tables.aliases
        records = self.cache.get(CachePrefix.ALIAS, name)
        if records is not MISSING:
            return AliasTable.from_records(records)
        df = self._optional_table(name)
        default = self.settings.default_alias
        aliases = (
            AliasTable.from_frame(df, self.settings.columns, default=default, table=name)
            if df is not None
            else AliasTable(default=default)
        )
        self.cache.put(CachePrefix.ALIAS, (name,), aliases.to_records())
        return aliases

    def exec_map(self) -> ExecFamilyMap:
        name = self.settings.tables.exec_descriptions
        records = self.cache.get(CachePrefix.EXEC_MAP, name)
        if records is not MISSING:
            return ExecFamilyMap.from_records(records)
        df = self._optional_table(name)
        exec_map = ExecFamilyMap.from_frame(df, self.settings.columns, table=name) if df is not None else ExecFamilyMap()
        self.cache.put(CachePrefix.EXEC_MAP, (name,), exec_map.to_records())
        return exec_map

    def family_lookup(self) -> FamilyLookup:
        return self.cache.lookup.get(lambda: FamilyLookup(self.alias_table(), self.exec_map()))

    def level_table(self) -> LevelTable:
        name = self.settings.tables.levels
        return LevelTable.from_frame(self.tables.get_table(name), self.settings.columns, table=name)

    def internal_records(self) -> List[InternalPayRecord]:
        """Active payroll records, parsed once per cached snapshot of the payroll table."""
        name = self.settings.tables.internal
        entry = self.cache.entry(CachePrefix.TABLE, name)
        if entry is not None and self._records_memo is not None and self._records_memo[0] is entry:
            return list(self._records_memo[1])
        df = self._optional_table(name)
        if df is None:
            return []
        records = load_internal_records(df, self.settings, table=name)
        entry = self.cache.entry(CachePrefix.TABLE, name)
        if entry is not None:
            self._records_memo = (entry, records)
        return list(records)

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def rebuild_index(self) -> BenchmarkIndex:
        """Build the index from the raw tables and publish it with one cache write."""
        lookup = self.family_lookup()
        builder = IndexBuilder(
            settings=self.settings,
            tables=self.tables,
            lookup=lookup,
            level_table=self.level_table(),
            internal_index=build_internal_index(self.internal_records(), lookup.aliases),
        )
        index = builder.build()
        self.cache.put(CachePrefix.INDEX, INDEX_KEY, index.to_payload())
        self._remember_index(index)
        self.index_builds += 1
        return index

    def _remember_index(self, index: BenchmarkIndex) -> None:
        entry = self.cache.entry(CachePrefix.INDEX, *INDEX_KEY)
        self._index_memo = (entry, index) if entry is not None else None

    def get_index(self) -> BenchmarkIndex:
        """Published index; decoded once per cache entry, rebuilt lazily on a miss."""
        entry = self.cache.entry(CachePrefix.INDEX, *INDEX_KEY)
        if entry is not None and self._index_memo is not None and self._index_memo[0] is entry:
            return self._index_memo[1]
        payload = self.cache.get(CachePrefix.INDEX, *INDEX_KEY)
        if payload is not MISSING:
            try:
                index = BenchmarkIndex.from_payload(payload)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Cached benchmark index unusable, rebuilding: %s", e)
            else:
                self._remember_index(index)
                return index
        return self.rebuild_index()

    def export_index(self, path: Union[str, Path]) -> Path:
        """Write the denormalized index table as CSV."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.get_index().to_frame().to_csv(path, index=False)
        logger.info("Exported benchmark index to %s", path)
        return path

    def clear_all_caches(self) -> int:
        return self.cache.clear_all()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve_range(self, band: str, region: str, family: str, level: str) -> RangeResult:
        """(min, mid, max) market range for a band, region, family and level."""
        family = to_text(family)
        spec = parse_level(level)
        region_name = self.settings.region_for_site(to_text(region))
        if not family or spec is None or region_name not in self.settings.region_tables:
            logger.debug("Unresolvable range query: band=%s region=%s family=%s level=%s", band, region, family, level)
            return RangeResult.empty()

        lookup = self.family_lookup()
        labels = band_percentiles(effective_band(band, family, lookup, self.settings.engineering_prefixes))

        row = self.get_index().get(lookup.exec_family(family), spec.name, region_name)
        if row is not None:
            result = RangeResult(*(row.percentile(label) for label in labels))
            if not result.is_empty:
                return result

        table = self.settings.table_for_region(region_name)
        headers = HeaderLookup()
        snapshots = TableSnapshots(self.tables)
        values = []
        for label in labels:
            value = None
            for code in lookup.codes_for(family):
                value = self.scanner.resolve_level(table, code, spec, label, headers, snapshots)
                if value is not None:
                    break
            values.append(round_to_step(value, MARKET_ROUNDING))
        return RangeResult(*values)

    def resolve_internal_stats(self, region: str, family_or_code: str, level: str) -> InternalStats:
        """Order statistics of active internal pay; zero count when nothing matches."""
        region_name = self.settings.region_for_site(to_text(region))
        family_or_code = to_text(family_or_code)
        parts = (region_name, family_or_code.upper(), to_text(level).upper())
        cached = self.cache.get(CachePrefix.INTERNAL, *parts)
        if cached is not MISSING:
            return InternalStats(*cached)
        if not family_or_code:
            return InternalStats.empty()
        stats = filter_stats(self.internal_records(), region_name, family_or_code, level)
        self.cache.put(CachePrefix.INTERNAL, parts, list(stats))
        return stats
