# src/workout_tracker/tasks/task_models.py

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

_EPOCH = datetime.fromtimestamp(0, UTC)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    color: str


# Shown for tasks whose category_id no longer matches any category.
FALLBACK_CATEGORY = Category(id="", name="Unknown", color="#888888")

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="1", name="Cardio", color="#ef4444"),
    Category(id="2", name="Strength", color="#3b82f6"),
    Category(id="3", name="Flexibility", color="#10b981"),
)


@dataclass(frozen=True, slots=True)
class ExerciseSet:
    id: str
    reps: int = 0
    weight: float | None = None  # None = not tracked / bodyweight


@dataclass(frozen=True, slots=True)
class Exercise:
    id: str
    name: str
    sets: tuple[ExerciseSet, ...] = ()


@dataclass(frozen=True, slots=True)
class WorkoutTask:
    id: str
    title: str
    category_id: str
    created_at: datetime

    completed: bool = False
    details: str | None = None
    notes: str | None = None
    exercises: tuple[Exercise, ...] = ()


# ---- coercion helpers ----


def coerce_reps(raw: Any) -> int:
    """Non-negative integer; anything unparsable becomes 0."""
    if isinstance(raw, bool):
        return 0
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, value)


def coerce_weight(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str) and not raw.strip():
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return max(0.0, value)


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    return raw if isinstance(raw, str) else str(raw)


def _id_or_new(raw: Any) -> str:
    if isinstance(raw, (str, int)) and not isinstance(raw, bool) and str(raw):
        return str(raw)
    return new_id()


# ---- timestamps ----


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a trailing Z (2023-01-01T00:00:00.000Z)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> datetime:
    """
    Parse a stored creation time.

    Accepts ISO-8601 strings (with or without Z) and epoch milliseconds.
    Malformed values fall back to the Unix epoch instead of failing the load.
    """
    if isinstance(raw, str) and raw.strip():
        try:
            ts = datetime.fromisoformat(raw.strip())
        except ValueError:
            logger.warning("Unparsable createdAt %r; using epoch.", raw)
            return _EPOCH
        return ts if ts.tzinfo is not None else ts.replace(tzinfo=UTC)

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(float(raw) / 1000.0, UTC)
        except (OverflowError, OSError, ValueError):
            pass

    logger.warning("Missing or invalid createdAt %r; using epoch.", raw)
    return _EPOCH


# ---- dict <-> model ----


def category_to_dict(category: Category) -> dict[str, Any]:
    return {"id": category.id, "name": category.name, "color": category.color}


def category_from_dict(data: dict[str, Any]) -> Category:
    return Category(
        id=_id_or_new(data.get("id")),
        name=str(data.get("name") or ""),
        color=str(data.get("color") or FALLBACK_CATEGORY.color),
    )


def set_to_dict(item: ExerciseSet) -> dict[str, Any]:
    out: dict[str, Any] = {"id": item.id, "reps": item.reps}
    if item.weight is not None:
        out["weight"] = item.weight
    return out


def set_from_dict(data: dict[str, Any]) -> ExerciseSet:
    return ExerciseSet(
        id=_id_or_new(data.get("id")),
        reps=coerce_reps(data.get("reps")),
        weight=coerce_weight(data.get("weight")),
    )


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    return {
        "id": exercise.id,
        "name": exercise.name,
        "sets": [set_to_dict(s) for s in exercise.sets],
    }


def exercise_from_dict(data: dict[str, Any]) -> Exercise:
    raw_sets = data.get("sets")
    sets = tuple(
        set_from_dict(s) for s in (raw_sets if isinstance(raw_sets, list) else []) if isinstance(s, dict)
    )
    return Exercise(id=_id_or_new(data.get("id")), name=str(data.get("name") or ""), sets=sets)


def task_to_dict(task: WorkoutTask) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "categoryId": task.category_id,
        "completed": task.completed,
    }
    if task.details is not None:
        out["details"] = task.details
    if task.notes is not None:
        out["notes"] = task.notes
    out["exercises"] = [exercise_to_dict(e) for e in task.exercises]
    out["createdAt"] = format_timestamp(task.created_at)
    return out


def task_from_dict(data: dict[str, Any]) -> WorkoutTask:
    """
    Rebuild a task from a stored record.

    Every optional field is filled explicitly:
    - exercises missing (older data) -> ()
    - completed missing or not a JSON boolean -> False
    - details/notes missing -> None
    """
    raw_exercises = data.get("exercises")
    exercises = tuple(
        exercise_from_dict(e)
        for e in (raw_exercises if isinstance(raw_exercises, list) else [])
        if isinstance(e, dict)
    )
    return WorkoutTask(
        id=_id_or_new(data.get("id")),
        title=str(data.get("title") or ""),
        category_id=str(data.get("categoryId") or ""),
        created_at=parse_timestamp(data.get("createdAt")),
        completed=data.get("completed") is True,
        details=_opt_str(data.get("details")),
        notes=_opt_str(data.get("notes")),
        exercises=exercises,
    )
