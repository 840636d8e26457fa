# salary_ranges/data/readers.py
"""
Cache-backed access to raw table snapshots.
"""

import datetime as dt
import logging
from decimal import Decimal
from typing import Any, Dict, List

import pandas as pd

from salary_ranges.cache.service import CachePrefix, CacheService
from salary_ranges.cache.ttl import MISSING

from .sources import TableSource

logger = logging.getLogger(__name__)


def _cell(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def frame_to_payload(df: pd.DataFrame) -> Dict[str, List]:
    return {
        "columns": [str(c) for c in df.columns],
        "data": [[_cell(v) for v in row] for row in df.itertuples(index=False, name=None)],
    }


def payload_to_frame(payload: Dict[str, List]) -> pd.DataFrame:
    return pd.DataFrame(payload["data"], columns=payload["columns"], dtype=object)


class RawTableAccessor:
    """Returns whole tables by name, reading each from its source at most once per TTL window."""

    def __init__(self, source: TableSource, cache: CacheService):
        self.source = source
        self.cache = cache

    def get_table(self, name: str) -> pd.DataFrame:
        payload = self.cache.get(CachePrefix.TABLE, name)
        if payload is not MISSING:
            try:
                return payload_to_frame(payload)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Cached snapshot of table '%s' unusable, re-reading: %s", name, e)
        df = self.source.read_table(name)
        self.cache.put(CachePrefix.TABLE, (name,), frame_to_payload(df))
        logger.debug("Cached snapshot of table '%s' (%d rows)", name, len(df))
        return payload_to_frame(frame_to_payload(df))


class TableSnapshots:
    """Decoded tables memoized for the duration of one resolution pass.

    Frames handed out here are shared within the pass and must not be modified.
    """

    def __init__(self, tables: RawTableAccessor):
        self.tables = tables
        self._frames: Dict[str, pd.DataFrame] = {}

    def get_table(self, name: str) -> pd.DataFrame:
        if name not in self._frames:
            self._frames[name] = self.tables.get_table(name)
        return self._frames[name]
