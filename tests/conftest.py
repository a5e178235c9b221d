# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from workout_tracker.core.state import AppState
from workout_tracker.tasks.task_store import WorkoutStore

from .fakes import InMemoryStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="workout-test",
        log_level="DEBUG",
        log_max_bytes=10_000,
        log_backup_count=1,
        console_enabled=True,
        data_dir=tmp_path / "data",
        storage_dir=tmp_path / "data" / "storage",
        log_dir=tmp_path / "data",
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def store(storage: InMemoryStorage) -> WorkoutStore:
    return WorkoutStore(storage)


@pytest.fixture()
def state(settings: SimpleNamespace, store: WorkoutStore) -> AppState:
    return AppState(settings=settings, store=store)
