# src/workout_tracker/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from ..core.errors import ValidationError
from ..core.ports import KeyValueStorage
from .task_models import (
    DEFAULT_CATEGORIES,
    FALLBACK_CATEGORY,
    Category,
    Exercise,
    ExerciseSet,
    WorkoutTask,
    category_from_dict,
    category_to_dict,
    coerce_reps,
    coerce_weight,
    exercise_from_dict,
    new_id,
    task_from_dict,
    task_to_dict,
)

logger = logging.getLogger(__name__)

TASKS_KEY = "workoutTasks"
CATEGORIES_KEY = "workoutCategories"

_UNSET: Any = object()

_TASK_EDITABLE = frozenset({"title", "category_id", "completed", "details", "notes", "exercises"})
_CATEGORY_EDITABLE = frozenset({"name", "color"})


def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _normalize_exercises(raw: Any) -> tuple[Exercise, ...]:
    """Accept Exercise values or stored-shape dicts ({id, name, sets}); reject anything else."""
    if isinstance(raw, (str, bytes, dict)):
        raise ValidationError("exercises must be a sequence of exercises")
    try:
        items = list(raw)
    except TypeError:
        raise ValidationError("exercises must be a sequence of exercises") from None
    out: list[Exercise] = []
    for item in items:
        if isinstance(item, Exercise):
            out.append(item)
        elif isinstance(item, dict):
            out.append(exercise_from_dict(item))
        else:
            raise ValidationError(f"not an exercise: {item!r}")
    return tuple(out)


def _check_fields(fields: dict[str, Any], allowed: frozenset[str], kind: str) -> None:
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValidationError(f"{kind} fields not editable: {', '.join(unknown)}")


class WorkoutStore:
    """
    In-memory workout store with write-through persistence.

    Two collections live here: categories (append order) and workout tasks
    (most recent first). Every mutation:
    - builds the new collection from frozen values (callers never mutate them)
    - swaps it in
    - writes the whole collection to storage before returning

    Unknown ids are silent no-ops. Reads never hit storage.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._categories: list[Category] = self._load_categories()
        self._tasks: list[WorkoutTask] = self._load_tasks()
        logger.info(
            "WorkoutStore ready tasks=%d categories=%d",
            len(self._tasks),
            len(self._categories),
        )

    # ---- loading ----

    def _read_json_list(self, key: str) -> list[Any] | None:
        """None means "nothing usable stored"; the caller picks the default."""
        raw = self._storage.get_item(key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.exception("Corrupt JSON under key=%s; ignoring stored value.", key)
            return None
        if not isinstance(data, list):
            logger.error("Expected a JSON array under key=%s, got %s.", key, type(data).__name__)
            return None
        return data

    def _load_categories(self) -> list[Category]:
        data = self._read_json_list(CATEGORIES_KEY)
        if data is None:
            return list(DEFAULT_CATEGORIES)
        return [category_from_dict(item) for item in data if isinstance(item, dict)]

    def _load_tasks(self) -> list[WorkoutTask]:
        data = self._read_json_list(TASKS_KEY)
        if data is None:
            return []
        tasks: list[WorkoutTask] = []
        seen: set[str] = set()
        for item in data:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object task record: %r", item)
                continue
            task = task_from_dict(item)
            if task.id in seen:
                # Older short ids could collide; the first record keeps the id.
                fresh = new_id()
                logger.warning("Duplicate task id=%s (%r); reassigned to %s.", task.id, task.title, fresh)
                task = replace(task, id=fresh)
            seen.add(task.id)
            tasks.append(task)
        return tasks

    # ---- persistence ----

    def _write(self, key: str, records: Iterable[dict[str, Any]]) -> None:
        payload = json.dumps(list(records), ensure_ascii=False)
        try:
            self._storage.set_item(key, payload)
        except OSError:
            # In-memory state stays authoritative; the next successful write catches up.
            logger.exception("Failed to persist key=%s", key)

    def _save_tasks(self) -> None:
        self._write(TASKS_KEY, (task_to_dict(t) for t in self._tasks))

    def _save_categories(self) -> None:
        self._write(CATEGORIES_KEY, (category_to_dict(c) for c in self._categories))

    # ---- reads ----

    def get_filtered_tasks(self, category_id: str | None = None) -> list[WorkoutTask]:
        """Tasks with the given category_id in list order; all tasks when no filter is set."""
        if not category_id:
            return list(self._tasks)
        return [t for t in self._tasks if t.category_id == category_id]

    def get_categories(self) -> list[Category]:
        return list(self._categories)

    def get_task(self, task_id: str) -> WorkoutTask | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def get_category(self, category_id: str) -> Category | None:
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def resolve_category(self, category_id: str) -> Category:
        """Category for display; dangling references resolve to the "Unknown" placeholder."""
        return self.get_category(category_id) or FALLBACK_CATEGORY

    # ---- tasks ----

    def add_task(
        self,
        *,
        title: str,
        category_id: str,
        completed: bool = False,
        details: str | None = None,
        notes: str | None = None,
        exercises: Iterable[Exercise | dict[str, Any]] = (),
    ) -> str:
        now = datetime.now(UTC)
        task = WorkoutTask(
            id=new_id(),
            title=_require_text(title, "title"),
            category_id=category_id,
            # stored with millisecond precision
            created_at=now.replace(microsecond=now.microsecond // 1000 * 1000),
            completed=bool(completed),
            details=details,
            notes=notes,
            exercises=_normalize_exercises(exercises),
        )
        self._tasks = [task, *self._tasks]
        self._save_tasks()
        logger.debug("Task added id=%s category=%s", task.id, category_id)
        return task.id

    def toggle_complete(self, task_id: str) -> None:
        task = self.get_task(task_id)
        if task is None:
            return
        self._replace_task(replace(task, completed=not task.completed))

    def delete_task(self, task_id: str) -> None:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            return
        self._tasks = remaining
        self._save_tasks()
        logger.debug("Task deleted id=%s", task_id)

    def update_task(self, task_id: str, **fields: Any) -> None:
        """
        Shallow-merge fields into a task.

        Editable: title, category_id, completed, details, notes, exercises.
        id and created_at never change.
        """
        task = self.get_task(task_id)
        if task is None:
            return

        _check_fields(fields, _TASK_EDITABLE, "task")
        if "title" in fields:
            fields["title"] = _require_text(fields["title"], "title")
        if "exercises" in fields:
            fields["exercises"] = _normalize_exercises(fields["exercises"])
        if "completed" in fields:
            fields["completed"] = bool(fields["completed"])

        if not fields:
            return
        self._replace_task(replace(task, **fields))

    def _replace_task(self, updated: WorkoutTask) -> None:
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]
        self._save_tasks()

    # ---- categories ----

    def add_category(self, name: str, color: str) -> str:
        category = Category(id=new_id(), name=_require_text(name, "name"), color=color)
        self._categories = [*self._categories, category]
        self._save_categories()
        logger.debug("Category added id=%s name=%s", category.id, category.name)
        return category.id

    def update_category(self, category_id: str, **fields: Any) -> None:
        category = self.get_category(category_id)
        if category is None:
            return

        _check_fields(fields, _CATEGORY_EDITABLE, "category")
        if "name" in fields:
            fields["name"] = _require_text(fields["name"], "name")

        if not fields:
            return
        updated = replace(category, **fields)
        self._categories = [updated if c.id == category_id else c for c in self._categories]
        self._save_categories()

    def delete_category(self, category_id: str) -> None:
        """Remove the category only; tasks keep their (now dangling) category_id."""
        remaining = [c for c in self._categories if c.id != category_id]
        if len(remaining) == len(self._categories):
            return
        self._categories = remaining
        self._save_categories()
        logger.debug("Category deleted id=%s", category_id)

    # ---- exercises / sets ----

    def _map_exercise(self, task: WorkoutTask, exercise_id: str, fn) -> tuple[Exercise, ...] | None:
        changed = False
        out: list[Exercise] = []
        for exercise in task.exercises:
            if exercise.id == exercise_id:
                exercise = fn(exercise)
                changed = True
            out.append(exercise)
        return tuple(out) if changed else None

    def add_exercise(self, task_id: str, name: str) -> str | None:
        task = self.get_task(task_id)
        if task is None:
            return None
        exercise = Exercise(id=new_id(), name=_require_text(name, "exercise name"))
        self.update_task(task_id, exercises=(*task.exercises, exercise))
        return exercise.id

    def delete_exercise(self, task_id: str, exercise_id: str) -> None:
        task = self.get_task(task_id)
        if task is None:
            return
        remaining = tuple(e for e in task.exercises if e.id != exercise_id)
        if len(remaining) != len(task.exercises):
            self.update_task(task_id, exercises=remaining)

    def add_set(self, task_id: str, exercise_id: str) -> str | None:
        task = self.get_task(task_id)
        if task is None:
            return None
        new_set = ExerciseSet(id=new_id())
        exercises = self._map_exercise(
            task, exercise_id, lambda e: replace(e, sets=(*e.sets, new_set))
        )
        if exercises is None:
            return None
        self.update_task(task_id, exercises=exercises)
        return new_set.id

    def update_set(
        self,
        task_id: str,
        exercise_id: str,
        set_id: str,
        *,
        reps: Any = _UNSET,
        weight: Any = _UNSET,
    ) -> None:
        """Change reps and/or weight of one set; omitted fields keep their value."""
        changes: dict[str, Any] = {}
        if reps is not _UNSET:
            changes["reps"] = coerce_reps(reps)
        if weight is not _UNSET:
            changes["weight"] = coerce_weight(weight)

        task = self.get_task(task_id)
        if task is None or not changes:
            return

        def apply(exercise: Exercise) -> Exercise:
            return replace(
                exercise,
                sets=tuple(replace(s, **changes) if s.id == set_id else s for s in exercise.sets),
            )

        exercises = self._map_exercise(task, exercise_id, apply)
        if exercises is not None and exercises != task.exercises:
            self.update_task(task_id, exercises=exercises)

    def delete_set(self, task_id: str, exercise_id: str, set_id: str) -> None:
        task = self.get_task(task_id)
        if task is None:
            return

        def drop(exercise: Exercise) -> Exercise:
            return replace(exercise, sets=tuple(s for s in exercise.sets if s.id != set_id))

        exercises = self._map_exercise(task, exercise_id, drop)
        if exercises is not None and exercises != task.exercises:
            self.update_task(task_id, exercises=exercises)
