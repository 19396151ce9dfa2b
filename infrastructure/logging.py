"""Logging initialization utilities using loguru."""

from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger

CONSOLE_FORMAT = "{message}"


def _below_warning(record) -> bool:
    return record["level"].no < logger.level("WARNING").no


def init_logging(log_dir: str | Path | None = None, level: str = "INFO") -> None:
    """Route progress to stdout, problems to stderr, and optionally to files.

    Args:
        log_dir: Directory for rotating log files; no file sink when None.
        level: Minimum level for all sinks.
    """
    logger.remove()
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level, filter=_below_warning)
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level="WARNING")

    if log_dir is None:
        return
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_path / "photos_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        backtrace=False,
        diagnose=False,
        level=level,
    )


def find_latest_log_file(log_dir: str | Path) -> Path | None:
    """Find the latest log file in the specified directory."""
    try:
        log_path = Path(log_dir)
        if not log_path.exists():
            return None

        log_files = list(log_path.glob("photos_*.log"))
        if not log_files:
            return None

        return max(log_files, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None
