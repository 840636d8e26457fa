"""
Structured logging configuration for the salary-ranges engine.

Sets up the root logger plus dedicated log files for index builds and
performance timings, so a batch rebuild can be audited separately from the
per-query chatter.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Set

# Logger names for different concerns
INDEX_LOGGER = "salary_ranges.index"
PERFORMANCE_LOGGER = "salary_ranges.performance"
DEBUG_LOGGER = "salary_ranges.debug"

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILES = (
    "combined.log",
    "warnings_errors.log",
    "index_build.log",
    "performance_metrics.log",
    "debug_detail.log",
)

_LOGGING_CONFIGURED = False
_log_files_created: Set[Path] = set()


def clear_logs(log_dir: Path) -> None:
    """Delete the known log files in ``log_dir``."""
    for name in LOG_FILES:
        log_file = log_dir / name
        if log_file.exists():
            try:
                log_file.unlink()
            except OSError as e:
                print(f"Warning: Could not delete {log_file}: {e}")


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
        mode="a",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    _log_files_created.add(path)
    return handler


def _attach(logger_name: str, handler: logging.Handler, level: int) -> None:
    concern_logger = logging.getLogger(logger_name)
    for h in concern_logger.handlers[:]:
        concern_logger.removeHandler(h)
    concern_logger.setLevel(level)
    concern_logger.addHandler(handler)
    concern_logger.propagate = True  # Allow to bubble up to root


def setup_logging(log_dir: Path, debug: bool = False, clear_existing: bool = True) -> None:
    """
    Configure logging for the application.

    Creates:
    - combined.log: all messages (INFO+)
    - warnings_errors.log: warnings and errors (WARNING+)
    - index_build.log: index rebuild events (INFO+)
    - performance_metrics.log: timings (INFO+)
    - debug_detail.log: detailed debug information (only if debug=True)

    Args:
        log_dir: Directory where log files will be stored
        debug: If True, enables debug logging and creates debug_detail.log
        clear_existing: If True, clears existing log files before starting
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    if clear_existing:
        clear_logs(log_dir)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    file_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console_formatter = logging.Formatter("%(levelname)-8s %(message)s")

    # Console handler (for warnings and above)
    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(console_formatter)
    root_logger.addHandler(console)

    root_logger.addHandler(_rotating_handler(log_dir / "combined.log", logging.INFO, file_formatter))
    root_logger.addHandler(_rotating_handler(log_dir / "warnings_errors.log", logging.WARNING, file_formatter))

    _attach(INDEX_LOGGER, _rotating_handler(log_dir / "index_build.log", logging.INFO, file_formatter), logging.INFO)
    _attach(
        PERFORMANCE_LOGGER,
        _rotating_handler(log_dir / "performance_metrics.log", logging.INFO, file_formatter),
        logging.INFO,
    )
    if debug:
        _attach(
            DEBUG_LOGGER,
            _rotating_handler(log_dir / "debug_detail.log", logging.DEBUG, file_formatter),
            logging.DEBUG,
        )

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Allow ``setup_logging`` to run again (used between CLI invocations in tests)."""
    global _LOGGING_CONFIGURED
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for name in (INDEX_LOGGER, PERFORMANCE_LOGGER, DEBUG_LOGGER):
        concern_logger = logging.getLogger(name)
        for handler in concern_logger.handlers[:]:
            concern_logger.removeHandler(handler)
            handler.close()
    _log_files_created.clear()
    _LOGGING_CONFIGURED = False

