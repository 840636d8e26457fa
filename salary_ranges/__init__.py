"""Compensation benchmark resolution engine.

Combines market survey tables with internal payroll data to resolve salary
range triads for a (region, job family, level) triple.
"""

from salary_ranges.exceptions import (
    ConfigError,
    ConfigLoadError,
    MissingColumnError,
    MissingTableError,
    SalaryRangesError,
)

__version__ = "3.2.0"

__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "MissingColumnError",
    "MissingTableError",
    "SalaryRangesError",
    "__version__",
]
