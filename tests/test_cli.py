import csv

import pytest

from logging_config import reset_logging
from salary_ranges.cli import main

from conftest import UK_ROWS, make_tables

INDIA_TABLE = "Aon India - 2025"


@pytest.fixture
def tables_dir(tmp_path):
    directory = tmp_path / "tables"
    directory.mkdir()
    tables = make_tables(**{INDIA_TABLE: UK_ROWS[:1]})
    for name, rows in tables.items():
        with open(directory / f"{name}.csv", "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(rows)
    return directory


@pytest.fixture
def run(tables_dir, tmp_path):
    def _run(*args):
        argv = ["--tables-dir", str(tables_dir), "--log-dir", str(tmp_path / "logs")] + list(args)
        try:
            return main(argv)
        finally:
            reset_logging()

    return _run


def test_resolve_range(run, capsys):
    assert run("resolve-range", "--band", "X0", "--region", "US", "--family", "Engineering", "--level", "L5 IC") == 0
    assert capsys.readouterr().out.strip() == "150000\t165000\t190000"


def test_resolve_range_blank_cells(run, capsys):
    assert run("resolve-range", "--region", "US", "--family", "Marketing", "--level", "L5 IC") == 0
    assert capsys.readouterr().out == "\t\t\n"


def test_internal_stats(run, capsys):
    assert run("internal-stats", "--region", "UK", "--family", "SA.ACCM", "--level", "L6 IC") == 0
    assert capsys.readouterr().out.strip() == "50000\t65000\t80000\t4"


def test_build_index_writes_csv_and_logs(run, tmp_path, capsys):
    output = tmp_path / "index.csv"
    assert run("build-index", "--output", str(output)) == 0
    assert output.exists()
    assert "rows written to" in capsys.readouterr().out
    assert (tmp_path / "logs" / "index_build.log").exists()
    assert (tmp_path / "logs" / "combined.log").exists()


def test_missing_table_reports_config_error(tmp_path, capsys):
    empty = tmp_path / "empty"
    empty.mkdir()
    try:
        code = main(["--tables-dir", str(empty), "--log-dir", str(tmp_path / "logs"), "build-index", "--output", "x.csv"])
    finally:
        reset_logging()
    assert code == 1
    assert "Configuration error" in capsys.readouterr().err


def test_bad_config_file(tables_dir, tmp_path, capsys):
    config = tmp_path / "settings.yaml"
    config.write_text("cache_ttl_seconds: 0\n", encoding="utf-8")
    try:
        code = main(["--tables-dir", str(tables_dir), "--log-dir", str(tmp_path / "logs"), "--config", str(config),
                     "internal-stats", "--region", "UK", "--family", "Sales", "--level", "L6 IC"])
    finally:
        reset_logging()
    assert code == 1
