# src/workout_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import WorkoutRepo


@dataclass
class AppState:
    # Settings object (config.Settings in production, SimpleNamespace in tests).
    settings: Any

    store: WorkoutRepo

    # Category filter applied by /list when no argument is given (None = all).
    active_filter: str | None = None
