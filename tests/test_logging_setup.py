# tests/test_logging_setup.py

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from workout_tracker.logging_setup import log_file_name, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_log_file_name() -> None:
    assert log_file_name("Workout Tracker") == "workout-tracker.log"
    assert log_file_name("!!!") == "workout.log"


def test_setup_logging_writes_rotating_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path, app_name="Gym Log", max_bytes=500, backup_count=2)

    assert log_file == tmp_path / "gym-log.log"
    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    assert len(handlers) == 1
    assert handlers[0].maxBytes == 500
    assert handlers[0].backupCount == 2

    log = logging.getLogger("workout_tracker.tasks.task_store")
    for i in range(50):
        log.debug("entry %d with some padding to fill the file", i)
    handlers[0].flush()

    assert log_file.exists()
    assert (tmp_path / "gym-log.log.1").exists()
    assert not (tmp_path / "gym-log.log.3").exists()
