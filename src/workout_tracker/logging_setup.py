# src/workout_tracker/logging_setup.py

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ReplNoiseFilter(logging.Filter):
    """
    Keep the REPL readable.

    Storage writes happen on every command and only matter in the log file,
    so workout_tracker.storage.* reaches the console at WARNING+ only.
    Anything outside the package (including 'py.warnings') needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith("workout_tracker."):
            return record.levelno >= logging.ERROR
        if record.name.startswith("workout_tracker.storage."):
            return record.levelno >= logging.WARNING
        return True


def log_file_name(app_name: str) -> str:
    """'My Tracker' -> 'my-tracker.log'; falls back to workout.log."""
    slug = re.sub(r"[^a-z0-9]+", "-", app_name.lower()).strip("-")
    return f"{slug or 'workout'}.log"


def setup_logging(
    *,
    log_dir: str | Path = ".local/workout",
    app_name: str = "workout",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Install a filtered stderr handler and a size-rotated log file.

    Call this ONCE, before the first log record. Existing root handlers are
    replaced. max_bytes <= 0 disables rotation. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name(app_name)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ReplNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        str(log_file),
        maxBytes=max(0, max_bytes),
        backupCount=max(0, backup_count),
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
