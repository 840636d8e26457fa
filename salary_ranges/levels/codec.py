"""Parsing of internal level strings and survey job-code tokens.

All parsers are total: malformed input yields ``None`` rather than an error.
"""

import re
from typing import Any, Optional

from .models import BenchmarkToken, LevelSpec, Role

_LEVEL_RE = re.compile(r"^\s*L\s*(\d+)(\.5)?\s+(IC|MGR)\s*$", re.IGNORECASE)
_TOKEN_RE = re.compile(r"^([A-Za-z]+)(\d*)$")

_ROLES = {"IC": Role.IC, "MGR": Role.MGR}


def parse_level(text: Any) -> Optional[LevelSpec]:
    """Parse ``L<n>[.5] (IC|Mgr)``; returns None when the grammar does not match."""
    if text is None:
        return None
    match = _LEVEL_RE.match(str(text))
    if not match:
        return None
    whole = int(match.group(1))
    if whole <= 0:
        return None
    is_half = match.group(2) is not None
    number = whole + 0.5 if is_half else float(whole)
    return LevelSpec(number=number, is_half=is_half, role=_ROLES[match.group(3).upper()])


def canonical_level(text: Any) -> Optional[str]:
    """Canonical spelling of a level string, or None if it does not parse."""
    spec = parse_level(text)
    return spec.name if spec else None


def parse_token(segment: Any) -> Optional[BenchmarkToken]:
    """Parse a token such as ``P5``; a token without digits has ``number=None``."""
    if segment is None:
        return None
    text = str(segment).strip()
    match = _TOKEN_RE.match(text)
    if not match:
        return None
    digits = match.group(2)
    return BenchmarkToken(match.group(1).upper(), int(digits) if digits else None)


def trailing_segment(code: Any) -> str:
    """Text after the last ``.`` of a job code (the whole code if it has none)."""
    return str(code).strip().rsplit(".", 1)[-1] if code is not None else ""


def code_base(code: Any) -> str:
    """Job code without its trailing token segment, e.g. ``EN.SODE.P5`` -> ``EN.SODE``."""
    text = str(code).strip() if code is not None else ""
    return text.rsplit(".", 1)[0] if "." in text else text


def parse_code_token(code: Any) -> Optional[BenchmarkToken]:
    """Token from the trailing segment of a full job code."""
    if code is None:
        return None
    return parse_token(trailing_segment(code))
