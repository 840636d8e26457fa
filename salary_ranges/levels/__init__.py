__all__ = [
    "BenchmarkToken",
    "LevelEntry",
    "LevelSpec",
    "LevelTable",
    "Role",
    "canonical_level",
    "code_base",
    "parse_code_token",
    "parse_level",
    "parse_token",
    "trailing_segment",
]

from .codec import (
    canonical_level,
    code_base,
    parse_code_token,
    parse_level,
    parse_token,
    trailing_segment,
)
from .models import BenchmarkToken, LevelSpec, Role
from .table import LevelEntry, LevelTable
