import pytest

from salary_ranges.engines.bands import X0, X1, Y1, band_percentiles, effective_band, normalize_band
from salary_ranges.mapping.aliases import AliasTable
from salary_ranges.mapping.families import ExecFamilyMap, FamilyLookup

ENGINEERING = ["EN.", "TE."]


@pytest.fixture
def lookup():
    exec_map = ExecFamilyMap([("EN.SDEV", "Engineering"), ("TE.QA", "Test Engineering"), ("SA.ACCM", "Sales")])
    return FamilyLookup(AliasTable(default=("EN.SODE", "EN.SDEV")), exec_map)


@pytest.mark.parametrize(
    "band, expected",
    [
        ("X0", ("P62.5", "P75", "P90")),
        ("X1", ("P50", "P62.5", "P75")),
        ("Y1", ("P40", "P50", "P62.5")),
        ("x0", ("P62.5", "P75", "P90")),
        ("Z9", ("P40", "P50", "P62.5")),
    ],
)
def test_band_percentiles(band, expected):
    assert band_percentiles(band) == expected


@pytest.mark.parametrize("band", [None, "", "  ", "X2"])
def test_unknown_bands_become_y1(band):
    assert normalize_band(band) == Y1


@pytest.mark.parametrize("family", ["EN.SODE", "en.sdev", "Engineering", "Test Engineering", "TE.QA"])
@pytest.mark.parametrize("band", [X0, X1])
def test_engineering_families_keep_x_bands(lookup, family, band):
    assert effective_band(band, family, lookup, ENGINEERING) == band


@pytest.mark.parametrize("family", ["SA.ACCM", "Sales", "Software Engineering", "FI.ACCT"])
@pytest.mark.parametrize("band", [X0, X1, Y1])
def test_other_families_downgraded_to_y1(lookup, family, band):
    assert effective_band(band, family, lookup, ENGINEERING) == Y1
