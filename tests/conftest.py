import pytest

from salary_ranges.cache.service import CacheService
from salary_ranges.config.models import EngineSettings
from salary_ranges.data.sources import InMemoryTableSource
from salary_ranges.service import BenchmarkService

US_TABLE = "Aon US Premium - 2025"
UK_TABLE = "Aon UK London - 2025"

US_ROWS = [
    [
        "Job Code",
        "Job Family",
        "CFY Fixed Pay: 40th Percentile",
        "CFY Fixed Pay: 50th Percentile",
        "CFY Fixed Pay: 62.5th Percentile",
        "CFY Fixed Pay: 75th Percentile",
        "CFY Fixed Pay: 90th Percentile",
    ],
    ["EN.SODE.P4", "Software Engineering", 100000, 110000, 120000, 130000, 150000],
    ["EN.SODE.P5", "Software Engineering", 130000, 140000, 150000, 165000, 190000],
    ["EN.SODE.P6", "Software Engineering", 160000, 175000, 190000, 205000, 240000],
    ["EN.SODE.M5", "Software Engineering", 150000, 160000, 170000, 185000, 210000],
    ["EN.SODE.M6", "Software Engineering", 180000, 195000, 210000, 230000, 260000],
    ["EN.SODE.E1", "Software Engineering", 250000, 270000, 290000, 310000, 350000],
    ["EN.SODE.EA", "Software Engineering", 400000, 430000, 460000, 500000, 560000],
    ["FI.ACCT.F5", "Accounting", 90000, 100000, 110000, 120000, 140000],
    ["FI.ACCT.P6", "Accounting", 110000, 120000, 130000, 140000, 160000],
    ["SA.ACCM.P5", "Account Management", 80000, 90000, 100000, 110000, 130000],
    ["SA.ACCM.P6", "Account Management", "n/a", 95050, 105000, 115000, 135000],
]

UK_ROWS = [
    ["Job Code", "Job Family", "P10", "P25", "P40", "P50", "P62.5", "P75", "P90"],
    ["SA.ACCM.P6", "Account Management", 40000, 45000, 52000, 56000, 60000, 66000, 75000],
    ["EN.SODE.P5", "Software Engineering", 50000, 55000, 62000, 68000, 74000, 80000, 92000],
]

LEVEL_ROWS = [
    ["Level", "Aon Level"],
    ["L4 IC", "P4"],
    ["L5 IC", "P5"],
    ["L5.5 IC", ""],
    ["L6 IC", "P6"],
    ["L6.5 IC", ""],
    ["L7 IC", ""],
    ["L5 Mgr", "M5"],
    ["L6 Mgr", "M6"],
    ["L7 Mgr", "E1"],
    ["L8 Mgr", "E2"],
    ["L9 Mgr", "E3"],
    ["Intern", "P1"],
]

ALIAS_ROWS = [
    ["From Code", "To Code"],
    ["SA.ACCX", "SA.ACCM"],
]

EXEC_ROWS = [
    ["Code", "Exec Family"],
    ["EN.SDEV", "Engineering"],
    ["FI.ACCT", "Finance"],
    ["SA.ACCM", "Sales"],
]

INTERNAL_ROWS = [
    ["Site", "Job Family Code", "Mapped Family", "Level", "Active", "Employment Type", "Base Pay"],
    ["USA", "EN.SODE", "Engineering", "L5 IC", "Yes", "Permanent", 140000],
    ["New York", "EN.SDEV", "Engineering", "L5 IC", "TRUE", "Permanent", 150000],
    ["US", "EN.SODE", "", "L5 IC", "No", "Permanent", 999999],
    ["US", "EN.SODE", "Engineering", "L5 IC", "Yes", "Contractor", 888888],
    ["London", "SA.ACCM", "Sales", "L6 IC", "Yes", "Regular Full-Time", 50000],
    ["London", "SA.ACCM", "Sales", "L6 IC", "Yes", "Regular Full-Time", 60000],
    ["UK", "SA.ACCM", "Sales", "L6 IC", "Yes", "Permanent", 70000],
    ["United Kingdom", "SA.ACCM", "Sales", "L6 IC", "Yes", "Permanent", 80000],
]


def make_tables(**overrides):
    tables = {
        US_TABLE: US_ROWS,
        UK_TABLE: UK_ROWS,
        "Level Mapping": LEVEL_ROWS,
        "Job Family Aliases": ALIAS_ROWS,
        "Exec Families": EXEC_ROWS,
        "Base Data": INTERNAL_ROWS,
    }
    tables.update(overrides)
    return {name: rows for name, rows in tables.items() if rows is not None}


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    return EngineSettings(region_tables={"US": US_TABLE, "UK": UK_TABLE})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return InMemoryTableSource(make_tables())


@pytest.fixture
def service(source, settings, clock):
    return BenchmarkService(source, settings, CacheService(ttl_seconds=600, clock=clock))
