"""Header lookup for tables whose column titles vary between survey vintages."""

import logging
import re
from typing import Dict, Optional, Tuple

import pandas as pd

from salary_ranges.exceptions import MissingColumnError

logger = logging.getLogger(__name__)


def find_column(
    df: pd.DataFrame,
    pattern: str,
    table: str = "",
    required: bool = True,
    label: Optional[str] = None,
) -> Optional[str]:
    """Return the first column whose header matches ``pattern`` (case-insensitive).

    Raises:
        MissingColumnError: If ``required`` and no header matches.
    """
    regex = re.compile(pattern, re.IGNORECASE)
    for column in df.columns:
        if regex.search(str(column).strip()):
            return column
    if required:
        logger.error("Column %s not found in table '%s' (headers: %s)", label or pattern, table, list(df.columns))
        raise MissingColumnError(table, label or pattern)
    return None


class HeaderLookup:
    """Memoizes (table, pattern) -> column for the duration of one resolution pass."""

    def __init__(self):
        self._memo: Dict[Tuple[str, str], Optional[str]] = {}
        self.scans = 0

    def column(
        self,
        table: str,
        df: pd.DataFrame,
        pattern: str,
        required: bool = True,
        label: Optional[str] = None,
    ) -> Optional[str]:
        key = (table, pattern)
        if key in self._memo:
            column = self._memo[key]
            if column is None and required:
                raise MissingColumnError(table, label or pattern)
            return column
        self.scans += 1
        try:
            column = find_column(df, pattern, table=table, required=required, label=label)
        except MissingColumnError:
            self._memo[key] = None
            raise
        self._memo[key] = column
        return column
