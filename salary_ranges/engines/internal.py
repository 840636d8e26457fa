# salary_ranges/engines/internal.py
"""
Internal payroll aggregation: order statistics per (site, family, level).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from salary_ranges.config.models import EngineSettings
from salary_ranges.data.headers import find_column
from salary_ranges.levels.codec import canonical_level
from salary_ranges.mapping.aliases import AliasTable
from salary_ranges.utils.numeric import normalize_text, to_number, to_text

logger = logging.getLogger(__name__)

TRUTHY = {"TRUE", "YES", "Y", "1", "1.0", "ACTIVE"}

BucketKey = Tuple[str, str, str]


class InternalStats(NamedTuple):
    min: Optional[float]
    median: Optional[float]
    max: Optional[float]
    count: int

    @classmethod
    def empty(cls) -> "InternalStats":
        return cls(None, None, None, 0)


@dataclass(frozen=True)
class InternalPayRecord:
    """One payroll row reduced to the fields used for aggregation."""

    site: str
    family_code: str
    exec_family: str
    level: str
    pay: float
    active: bool = True


def is_truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return normalize_text(value) in TRUTHY


def normalize_level(value) -> str:
    """Canonical level spelling when it parses, otherwise normalized text."""
    return canonical_level(value) or normalize_text(value)


def load_internal_records(df: pd.DataFrame, settings: EngineSettings, table: str = "internal") -> List[InternalPayRecord]:
    """Read payroll rows; only active rows with a numeric pay are returned."""
    cols = settings.columns
    site_col = find_column(df, cols.site, table=table, label="Site")
    code_col = find_column(df, cols.family_code, table=table, label="Job Family Code")
    level_col = find_column(df, cols.internal_level, table=table, label="Level")
    active_col = find_column(df, cols.active, table=table, label="Active")
    pay_col = find_column(df, cols.pay, table=table, label="Pay")
    mapped_col = find_column(df, cols.mapped_family, table=table, required=False)
    type_col = find_column(df, cols.employment_type, table=table, required=False)

    allowed_types = {normalize_text(t) for t in settings.allowed_employment_types}
    records: List[InternalPayRecord] = []
    skipped = 0
    for _, row in df.iterrows():
        if not is_truthy(row[active_col]):
            skipped += 1
            continue
        if type_col is not None and allowed_types and normalize_text(row[type_col]) not in allowed_types:
            skipped += 1
            continue
        pay = to_number(row[pay_col])
        if pay is None:
            skipped += 1
            continue
        exec_family = row[mapped_col] if mapped_col is not None else None
        records.append(
            InternalPayRecord(
                site=settings.region_for_site(row[site_col]),
                family_code=normalize_text(row[code_col]),
                exec_family=" ".join(to_text(exec_family).split()),
                level=normalize_level(row[level_col]),
                pay=pay,
            )
        )
    logger.info("Loaded %d active payroll records (%d skipped) from '%s'", len(records), skipped, table)
    return records


def compute_stats(pays: Iterable[float]) -> InternalStats:
    values = [p for p in pays if p is not None]
    if not values:
        return InternalStats.empty()
    arr = np.asarray(values, dtype=float)
    return InternalStats(float(arr.min()), float(np.median(arr)), float(arr.max()), int(arr.size))


def family_synonyms(record: InternalPayRecord, aliases: AliasTable) -> List[str]:
    """Keys a record is published under: exec family, code, forward alias, reverse alias."""
    keys: List[str] = []
    candidates = ([record.exec_family] if record.exec_family else []) + aliases.synonyms(record.family_code)
    for candidate in candidates:
        key = normalize_text(candidate)
        if key and key not in keys:
            keys.append(key)
    return keys


def build_internal_index(records: Iterable[InternalPayRecord], aliases: AliasTable) -> Dict[BucketKey, InternalStats]:
    """Bucket active records by (site, family key, level) under every family synonym."""
    buckets: Dict[BucketKey, List[float]] = {}
    for record in records:
        if not record.active:
            continue
        site = normalize_text(record.site)
        for family_key in family_synonyms(record, aliases):
            buckets.setdefault((site, family_key, record.level), []).append(record.pay)
    index = {key: compute_stats(pays) for key, pays in buckets.items()}
    logger.debug("Built internal pay index with %d buckets", len(index))
    return index


def lookup_internal(
    index: Dict[BucketKey, InternalStats], site: str, family: str, level: str
) -> Optional[InternalStats]:
    return index.get((normalize_text(site), normalize_text(family), normalize_level(level)))


def filter_stats(records: Iterable[InternalPayRecord], site: str, family_or_code: str, level: str) -> InternalStats:
    """Stats for active records at ``site`` whose code or exec family equals ``family_or_code``."""
    site_key = normalize_text(site)
    family_key = normalize_text(family_or_code)
    level_key = normalize_level(level)
    pays = [
        r.pay
        for r in records
        if r.active
        and normalize_text(r.site) == site_key
        and (r.family_code == family_key or normalize_text(r.exec_family) == family_key)
        and r.level == level_key
    ]
    return compute_stats(pays)
