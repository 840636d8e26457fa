"""Category bands: which three percentiles form a salary range.

``X0`` and ``X1`` are reserved for engineering-eligible families. Every
other family gets ``Y1`` whatever band was asked for; that downgrade is
policy, not an error.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

from salary_ranges.mapping.families import FamilyLookup
from salary_ranges.utils.columns import P40, P50, P62_5, P75, P90

logger = logging.getLogger(__name__)

X0 = "X0"
X1 = "X1"
Y1 = "Y1"

BAND_PERCENTILES: Dict[str, Tuple[str, str, str]] = {
    X0: (P62_5, P75, P90),
    X1: (P50, P62_5, P75),
    Y1: (P40, P50, P62_5),
}

ENGINEERING_BANDS = (X0, X1)


def normalize_band(band: Optional[str]) -> str:
    text = str(band or "").strip().upper()
    return text if text in BAND_PERCENTILES else Y1


def effective_band(
    band: Optional[str], family: str, lookup: FamilyLookup, engineering_prefixes: Sequence[str]
) -> str:
    """Band actually applied for ``family``: X0/X1 only for engineering-eligible families."""
    requested = normalize_band(band)
    if requested in ENGINEERING_BANDS and not lookup.matches_prefixes(family, engineering_prefixes):
        logger.debug("Band %s not available for family '%s'; using %s", requested, family, Y1)
        return Y1
    return requested


def band_percentiles(band: str) -> Tuple[str, str, str]:
    """(min, mid, max) percentile labels for a band."""
    return BAND_PERCENTILES[normalize_band(band)]
