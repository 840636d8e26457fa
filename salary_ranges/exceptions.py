"""
Custom exception classes for benchmark resolution.

Only configuration problems are raised. A missing data point (no matching
row, blank percentile cell, unparsable level) is never an exception: it is
returned as ``None`` and rendered blank by the caller.
"""


class SalaryRangesError(Exception):
    """Base exception for all salary-ranges errors."""

    pass


class ConfigError(SalaryRangesError):
    """Raised when the engine is set up against tables it cannot use."""

    pass


class MissingTableError(ConfigError):
    """Raised when a required table (sheet) does not exist."""

    pass


class MissingColumnError(ConfigError):
    """Raised when a required column cannot be located in a table header."""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column
        super().__init__(f"Required column '{column}' not found in table '{table}'")


class ConfigLoadError(ConfigError):
    """Raised when a settings file cannot be read or fails validation."""

    pass
