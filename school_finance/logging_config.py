"""
Structured logging configuration for the school_finance package.

This module provides a centralized way to configure logging across the application
with different log levels and output files for different concerns.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional, Tuple

# Define logger names for different concerns
PROJECTION_LOGGER = "school_finance.projections"
SCENARIO_LOGGER = "school_finance.scenarios"
ERROR_LOGGER = "school_finance.errors"
DEBUG_LOGGER = "school_finance"

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILES = (
    "projection_events.log",
    "scenario_events.log",
    "warnings_errors.log",
    "debug_detail.log",
    "combined.log",
)

_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5

# Track if logging is already configured and the handlers it installed
_LOGGING_CONFIGURED = False
_installed_handlers: List[Tuple[Optional[str], logging.Handler]] = []


def clear_logs(log_dir: Path) -> None:
    """
    Clear all log files in the specified directory.

    Args:
        log_dir: Directory containing log files to clear
    """
    for name in LOG_FILES:
        log_file = log_dir / name
        if log_file.exists():
            try:
                log_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(f"Could not delete {log_file}: {e}")


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
        mode="a",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _attach(logger_name: str, handler: logging.Handler, level: int) -> None:
    named = logging.getLogger(logger_name)
    for h in named.handlers[:]:
        named.removeHandler(h)
    named.setLevel(level)
    named.addHandler(handler)
    _installed_handlers.append((logger_name, handler))
    named.propagate = True  # Allow to bubble up to root


def setup_logging(log_dir: Path, debug: bool = False, clear_existing: bool = True) -> None:
    """
    Configure structured logging for the application.

    Creates separate log files for different concerns:
    - projection_events.log: projection engine and reporting events (INFO+)
    - scenario_events.log: scenario store reads and writes (INFO+)
    - warnings_errors.log: Warnings and errors (WARNING+)
    - debug_detail.log: Detailed debug information (DEBUG, only if debug=True)
    - combined.log: Combined log of all messages (INFO+)

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

    # Remove all handlers from the root logger before setup
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
    _installed_handlers.append((None, console))

    for name, level in (("combined.log", logging.INFO), ("warnings_errors.log", logging.WARNING)):
        handler = _file_handler(log_dir / name, level, file_formatter)
        root_logger.addHandler(handler)
        _installed_handlers.append((None, handler))

    package_level = logging.DEBUG if debug else logging.INFO
    _attach(
        PROJECTION_LOGGER,
        _file_handler(log_dir / "projection_events.log", logging.INFO, file_formatter),
        package_level,
    )
    _attach(
        SCENARIO_LOGGER,
        _file_handler(log_dir / "scenario_events.log", logging.INFO, file_formatter),
        package_level,
    )

    if debug:
        _attach(
            DEBUG_LOGGER,
            _file_handler(log_dir / "debug_detail.log", logging.DEBUG, file_formatter),
            logging.DEBUG,
        )

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Drop handlers installed by setup_logging so it can run again."""
    global _LOGGING_CONFIGURED

    for name, handler in _installed_handlers:
        logging.getLogger(name).removeHandler(handler)
        handler.close()
    _installed_handlers.clear()
    _LOGGING_CONFIGURED = False
