# salary_ranges/data/sources.py
"""
Providers of whole-table snapshots (header row + data rows) by table name.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Protocol, Sequence, Union

import pandas as pd

from salary_ranges.exceptions import MissingTableError

logger = logging.getLogger(__name__)

TableLike = Union[pd.DataFrame, Sequence[Sequence[object]]]


class TableSource(Protocol):
    reads: int

    def read_table(self, name: str) -> pd.DataFrame: ...


def frame_from_rows(rows: Sequence[Sequence[object]]) -> pd.DataFrame:
    """Build an object-dtype DataFrame from a 2D list whose first row is the header."""
    if not rows:
        return pd.DataFrame()
    header = [str(h).strip() for h in rows[0]]
    return pd.DataFrame([list(r) for r in rows[1:]], columns=header, dtype=object)


class InMemoryTableSource:
    """Tables held in memory, given as DataFrames or 2D lists with a header row."""

    def __init__(self, tables: Mapping[str, TableLike]):
        self._tables: Dict[str, pd.DataFrame] = {}
        for name, table in tables.items():
            self._tables[name] = table.copy() if isinstance(table, pd.DataFrame) else frame_from_rows(table)
        self.reads = 0

    def read_table(self, name: str) -> pd.DataFrame:
        if name not in self._tables:
            raise MissingTableError(f"Table '{name}' not found")
        self.reads += 1
        return self._tables[name].copy()


class CsvDirectoryTableSource:
    """Tables stored as ``<name>.csv`` (or ``<name>.parquet``) files in one directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.reads = 0

    def _path_for(self, name: str) -> Path:
        for suffix in (".csv", ".parquet"):
            path = self.directory / f"{name}{suffix}"
            if path.exists():
                return path
        logger.error("Table '%s' not found in %s", name, self.directory)
        raise MissingTableError(f"Table '{name}' not found in {self.directory}")

    def read_table(self, name: str) -> pd.DataFrame:
        path = self._path_for(name)
        if path.suffix == ".parquet":
            df = pd.read_parquet(path).astype(object)
        else:
            df = pd.read_csv(path, dtype=object, keep_default_na=True)
        df.columns = [str(c).strip() for c in df.columns]
        self.reads += 1
        logger.info(f"Loaded {len(df)} rows from table '{name}': {path}")
        return df
