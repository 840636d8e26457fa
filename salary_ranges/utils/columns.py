# salary_ranges/utils/columns.py

# Percentile labels in table order. P40..P90 feed the category bands; P10 and
# P25 are carried through to the index when a survey table has them.
P10 = "P10"
P25 = "P25"
P40 = "P40"
P50 = "P50"
P62_5 = "P62.5"
P75 = "P75"
P90 = "P90"

PERCENTILES = (P10, P25, P40, P50, P62_5, P75, P90)
REQUIRED_PERCENTILES = (P40, P50, P62_5, P75, P90)
OPTIONAL_PERCENTILES = (P10, P25)

# Survey table headers
JOB_CODE = "Job Code"
JOB_FAMILY = "Job Family"

# Denormalized index output columns
IDX_SITE = "Site"
IDX_REGION = "Region"
IDX_CODE = "Job Code"
IDX_EXEC_FAMILY = "Exec Family"
IDX_RAW_FAMILY = "Job Family"
IDX_LEVEL = "Level"
IDX_TOKEN = "Token"
IDX_INT_MIN = "Internal Min"
IDX_INT_MEDIAN = "Internal Median"
IDX_INT_MAX = "Internal Max"
IDX_INT_COUNT = "Internal Count"

INDEX_COLUMNS = (
    [IDX_SITE, IDX_REGION, IDX_CODE, IDX_EXEC_FAMILY, IDX_RAW_FAMILY, IDX_LEVEL, IDX_TOKEN]
    + list(PERCENTILES)
    + [IDX_INT_MIN, IDX_INT_MEDIAN, IDX_INT_MAX, IDX_INT_COUNT]
)


def percentile_pattern(label: str) -> str:
    """Header regex for a percentile label such as ``P62.5``.

    Matches terse headers (``P50``, ``p 50``) and verbose survey headers
    (``CFY Fixed Pay: 50th Percentile``). Intended for ``re.IGNORECASE``.
    """
    number = label[1:].replace(".", r"\.")
    return (
        rf"^\s*p\s*{number}\s*$"
        rf"|(?<![\d.]){number}(?:st|nd|rd|th)?\s*percentile"
    )
