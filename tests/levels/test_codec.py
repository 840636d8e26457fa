import pytest

from salary_ranges.levels.codec import (
    canonical_level,
    code_base,
    parse_code_token,
    parse_level,
    parse_token,
    trailing_segment,
)
from salary_ranges.levels.models import BenchmarkToken, LevelSpec, Role


@pytest.mark.parametrize(
    "text, number, is_half, role",
    [
        ("L6 IC", 6.0, False, Role.IC),
        ("L6.5 Mgr", 6.5, True, Role.MGR),
        ("  l10   mgr ", 10.0, False, Role.MGR),
        ("L1 ic", 1.0, False, Role.IC),
    ],
)
def test_parse_level_valid(text, number, is_half, role):
    spec = parse_level(text)
    assert spec == LevelSpec(number, is_half, role)


@pytest.mark.parametrize("text", ["", "L6", "6 IC", "L0 IC", "L6.25 IC", "L6 Director", "Intern", None, 6])
def test_parse_level_rejects_non_canonical(text):
    assert parse_level(text) is None


@pytest.mark.parametrize("name", ["L1 IC", "L4 IC", "L6 Mgr", "L9 Mgr", "L12 IC"])
def test_whole_level_round_trip(name):
    spec = parse_level(name)
    assert spec.name == name
    reparsed = parse_level(spec.name)
    assert (reparsed.floor, reparsed.role) == (spec.floor, spec.role)


def test_half_level_neighbours():
    spec = parse_level("L6.5 IC")
    assert spec.floor == 6 and spec.ceil == 7
    assert spec.floor_level().name == "L6 IC"
    assert spec.ceil_level().name == "L7 IC"
    assert spec.floor < spec.number < spec.ceil


def test_canonical_level():
    assert canonical_level("l5.5   mgr") == "L5.5 Mgr"
    assert canonical_level("junk") is None


def test_level_spec_invariants():
    with pytest.raises(ValueError):
        LevelSpec(0, False, Role.IC)
    with pytest.raises(ValueError):
        LevelSpec(6.5, False, Role.IC)


def test_role_preferred_letter():
    assert Role.IC.preferred_letter == "P"
    assert Role.MGR.preferred_letter == "M"


@pytest.mark.parametrize(
    "segment, expected",
    [
        ("P5", BenchmarkToken("P", 5)),
        ("e3", BenchmarkToken("E", 3)),
        ("EA", BenchmarkToken("EA", None)),
        ("M12", BenchmarkToken("M", 12)),
    ],
)
def test_parse_token(segment, expected):
    assert parse_token(segment) == expected


@pytest.mark.parametrize("segment", ["", "5P", "P-5", None])
def test_parse_token_rejects(segment):
    assert parse_token(segment) is None


def test_code_segments():
    assert trailing_segment("EN.SODE.P5") == "P5"
    assert code_base("EN.SODE.P5") == "EN.SODE"
    assert code_base("NODOTS") == "NODOTS"
    assert parse_code_token("FI.ACCT.F5") == BenchmarkToken("F", 5)
    assert str(parse_code_token("EN.SODE.EB")) == "EB"
