import pandas as pd
import pytest

import salary_ranges.service as service_module
from salary_ranges.cache.service import CachePrefix
from salary_ranges.data import readers
from salary_ranges.data.sources import InMemoryTableSource, frame_from_rows
from salary_ranges.engines.internal import InternalStats
from salary_ranges.exceptions import MissingTableError
from salary_ranges.levels.codec import parse_level
from salary_ranges.service import BenchmarkService, RangeResult
from salary_ranges.utils.columns import INDEX_COLUMNS

from conftest import INTERNAL_ROWS, US_ROWS, US_TABLE, make_tables


@pytest.mark.parametrize(
    "band, region, family, level, expected",
    [
        ("X0", "US", "Engineering", "L5 IC", (150000, 165000, 190000)),
        ("X1", "US", "EN.SODE", "L5 IC", (140000, 150000, 165000)),
        ("Y1", "US", "Engineering", "L5.5 IC", (145000, 157500, 170000)),
        ("X0", "US", "Sales", "L5 IC", (80000, 90000, 100000)),
        ("Y1", "New York", "Engineering", "L6 Mgr", (180000, 195000, 210000)),
        ("Y1", "UK", "SA.ACCM", "L6 IC", (52000, 56000, 60000)),
        ("Y1", "US", "SA.ACCM", "L6 IC", (None, 95100, 105000)),
    ],
)
def test_resolve_range_from_index(service, band, region, family, level, expected):
    assert tuple(service.resolve_range(band, region, family, level)) == expected


def test_downgraded_band_matches_y1(service):
    assert service.resolve_range("X0", "US", "Sales", "L6 IC") == service.resolve_range("Y1", "US", "Sales", "L6 IC")


def test_family_description_falls_back_to_scan(service):
    result = service.resolve_range("X0", "US", "Software Engineering", "L5 IC")
    assert tuple(result) == (130000, 140000, 150000)


def test_level_missing_from_index_falls_back_to_scan(service):
    result = service.resolve_range("Y1", "US", "Engineering", "L7 IC")
    assert tuple(result) == (250000, 270000, 290000)


def test_alias_code_resolves_to_its_family(service):
    result = service.resolve_range("Y1", "US", "SA.ACCX", "L5 IC")
    assert tuple(result) == (80000, 90000, 100000)


@pytest.mark.parametrize(
    "region, family, level",
    [
        ("Mars", "Engineering", "L5 IC"),
        ("US", "Engineering", "L5"),
        ("US", "Engineering", "Intern"),
        ("US", "", "L5 IC"),
        ("US", None, "L5 IC"),
        ("US", "Marketing", "L5 IC"),
        ("US", "Engineering", "L8 Mgr"),
    ],
)
def test_unresolvable_queries_are_empty(service, region, family, level):
    result = service.resolve_range("Y1", region, family, level)
    assert result == RangeResult.empty()
    assert result.is_empty


def test_index_built_once_across_queries(service):
    service.resolve_range("X0", "US", "Engineering", "L5 IC")
    service.resolve_range("Y1", "UK", "Sales", "L6 IC")
    service.resolve_range("Y1", "US", "Software Engineering", "L5 IC")
    assert service.index_builds == 1


def test_index_rebuilt_lazily_after_ttl(service, clock):
    service.get_index()
    clock.advance(601)
    service.get_index()
    assert service.index_builds == 2


def test_clear_all_forces_reread(service, source):
    service.resolve_range("X0", "US", "Engineering", "L5 IC")
    reads = source.reads
    removed = service.clear_all_caches()
    assert removed > 0
    assert service.cache.store.keys() == []
    service.resolve_range("X0", "US", "Engineering", "L5 IC")
    assert source.reads > reads
    assert service.index_builds == 2


def test_index_published_with_single_entry(service):
    service.rebuild_index()
    keys = [k for k in service.cache.store.keys() if k.startswith(CachePrefix.INDEX.value)]
    assert len(keys) == 1


def test_internal_stats(service):
    assert tuple(service.resolve_internal_stats("UK", "SA.ACCM", "L6 IC")) == (50000, 65000, 80000, 4)
    assert tuple(service.resolve_internal_stats("London", "Sales", "L6 IC")) == (50000, 65000, 80000, 4)
    assert tuple(service.resolve_internal_stats("US", "Engineering", "L5 IC")) == (140000, 145000, 150000, 2)


def test_internal_stats_no_match(service):
    assert service.resolve_internal_stats("US", "Sales", "L6 IC") == InternalStats.empty()
    assert service.resolve_internal_stats("US", "", "L6 IC").count == 0


def test_internal_stats_cached(service, source):
    service.resolve_internal_stats("UK", "SA.ACCM", "L6 IC")
    reads = source.reads
    assert tuple(service.resolve_internal_stats("uk", "sa.accm", "l6 ic")) == (50000, 65000, 80000, 4)
    assert source.reads == reads


def test_missing_level_table_is_config_error(settings):
    service = BenchmarkService(InMemoryTableSource(make_tables(**{"Level Mapping": None})), settings)
    with pytest.raises(MissingTableError):
        service.resolve_range("Y1", "US", "Engineering", "L5 IC")


def test_export_index(service, tmp_path):
    path = service.export_index(tmp_path / "out" / "index.csv")
    frame = pd.read_csv(path)
    assert list(frame.columns) == INDEX_COLUMNS
    assert len(frame) == len(service.get_index())


def test_date_columns_in_payroll_and_survey_tables(settings):
    payroll = frame_from_rows(INTERNAL_ROWS)
    payroll["Hire Date"] = pd.Timestamp("2020-01-01")
    survey = frame_from_rows(US_ROWS)
    survey["Survey Date"] = pd.Timestamp("2025-03-31")
    source = InMemoryTableSource(make_tables(**{"Base Data": payroll, US_TABLE: survey}))
    service = BenchmarkService(source, settings)

    assert tuple(service.resolve_internal_stats("UK", "SA.ACCM", "L6 IC")) == (50000, 65000, 80000, 4)
    assert tuple(service.resolve_range("X0", "US", "Engineering", "L5 IC")) == (150000, 165000, 190000)
    assert len(service.rebuild_index()) > 0


def test_index_decoded_once_per_published_entry(service, clock):
    first = service.get_index()
    assert service.get_index() is first
    service.resolve_range("X0", "US", "Engineering", "L5 IC")
    assert service.get_index() is first
    clock.advance(601)
    assert service.get_index() is not first


def test_fallback_scan_decodes_survey_table_once(service, monkeypatch):
    service.get_index()
    decoded = []
    real_decode = readers.payload_to_frame

    def counting_decode(payload):
        decoded.append(payload["columns"])
        return real_decode(payload)

    monkeypatch.setattr(readers, "payload_to_frame", counting_decode)
    assert service.resolve_range("Y1", "US", "Marketing", "L5.5 IC").is_empty
    assert len(decoded) == 1


def test_payroll_parsed_once_per_snapshot(service, monkeypatch):
    parsed = []
    real_load = service_module.load_internal_records

    def counting_load(*args, **kwargs):
        parsed.append(1)
        return real_load(*args, **kwargs)

    monkeypatch.setattr(service_module, "load_internal_records", counting_load)
    service.resolve_internal_stats("UK", "SA.ACCM", "L6 IC")
    service.resolve_internal_stats("US", "Engineering", "L5 IC")
    service.resolve_internal_stats("US", "Sales", "L6 IC")
    assert len(parsed) == 1
    service.clear_all_caches()
    service.resolve_internal_stats("UK", "SA.ACCM", "L6 IC")
    assert len(parsed) == 2


def test_half_level_neighbours_differ_between_index_and_scan(service):
    # Index: L7 IC has no token, so L6.5 IC carries the L6 values.
    assert tuple(service.resolve_range("Y1", "US", "Engineering", "L6.5 IC")) == (160000, 175000, 190000)
    # Scan: the ceiling level 7 is an executive level and matches E1.
    level = parse_level("L6.5 IC")
    assert service.scanner.resolve_level(US_TABLE, "EN.SODE", level, "P50") == (175000 + 270000) / 2
