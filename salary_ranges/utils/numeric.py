# salary_ranges/utils/numeric.py
"""Total numeric helpers: every function returns ``None`` instead of raising."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional

_STRIP_CHARS = re.compile(r"[,\s$£€₹]")


def to_number(value: Any) -> Optional[float]:
    """Coerce a table cell to float; blanks and text become ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = _STRIP_CHARS.sub("", str(value))
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_to_step(value: Optional[float], step: int = 1) -> Optional[float]:
    """Round half-up to the nearest multiple of ``step`` (e.g. 100 for market data)."""
    if value is None:
        return None
    try:
        units = (Decimal(str(value)) / Decimal(step)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    return float(units * Decimal(step))


def mean_of_present(values: Iterable[Optional[float]]) -> Optional[float]:
    """Average of the present values; a single present value is returned unmodified."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return sum(present) / len(present)


def normalize_text(value: Any) -> str:
    """Case and whitespace normalized text for comparisons."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return " ".join(str(value).split()).upper()


def to_text(value: Any) -> str:
    """Stripped text of a cell; blanks and NaN become an empty string."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()
