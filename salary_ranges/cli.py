# salary_ranges/cli.py
# Command-line interface entry point (argparse)
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from logging_config import INDEX_LOGGER, setup_logging
from salary_ranges.config.loaders import load_settings
from salary_ranges.data.sources import CsvDirectoryTableSource
from salary_ranges.exceptions import ConfigError
from salary_ranges.service import BenchmarkService

logger = logging.getLogger(__name__)

LOG_DIR = Path("output_dev/salary_ranges_logs")


def _blank(value) -> str:
    """Formula-style rendering: a missing value is an empty cell."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve compensation benchmark ranges.")
    parser.add_argument(
        "--tables-dir",
        type=str,
        required=True,
        help="Directory holding one <table name>.csv per input table.",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to the YAML settings file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(LOG_DIR),
        help=f"Directory to store log files (default: {LOG_DIR})",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build-index", help="Rebuild the benchmark index and write it as CSV.")
    build.add_argument("--output", type=str, required=True, help="Destination CSV path.")

    rng = sub.add_parser("resolve-range", help="Print min, mid and max for a band.")
    rng.add_argument("--band", type=str, default="Y1", help="Category band: X0, X1 or Y1.")
    rng.add_argument("--region", type=str, required=True)
    rng.add_argument("--family", type=str, required=True, help="Family code or exec family name.")
    rng.add_argument("--level", type=str, required=True, help='Internal level, e.g. "L6.5 IC".')

    stats = sub.add_parser("internal-stats", help="Print internal min, median, max and count.")
    stats.add_argument("--region", type=str, required=True)
    stats.add_argument("--family", type=str, required=True, help="Family code or exec family name.")
    stats.add_argument("--level", type=str, required=True)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the salary-ranges CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(log_dir=Path(args.log_dir), debug=args.debug)
    logger.info(f"Starting salary-ranges command with arguments: {vars(args)}")

    try:
        settings = load_settings(args.config)
        service = BenchmarkService(CsvDirectoryTableSource(args.tables_dir), settings)

        if args.command == "build-index":
            index = service.rebuild_index()
            path = service.export_index(args.output)
            logging.getLogger(INDEX_LOGGER).info("Wrote %d index rows to %s", len(index), path)
            print(f"{len(index)} rows written to {path}")
        elif args.command == "resolve-range":
            result = service.resolve_range(args.band, args.region, args.family, args.level)
            print("\t".join(_blank(v) for v in result))
        elif args.command == "internal-stats":
            stats = service.resolve_internal_stats(args.region, args.family, args.level)
            print("\t".join(_blank(v) for v in stats))
        return 0
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
