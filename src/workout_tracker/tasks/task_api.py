# src/workout_tracker/tasks/task_api.py

from __future__ import annotations

import logging
from typing import Any

from ..core.state import AppState
from .task_models import Exercise, ExerciseSet, WorkoutTask

logger = logging.getLogger(__name__)


def find_exercise(task: WorkoutTask, name: str) -> Exercise | None:
    wanted = name.strip().casefold()
    for exercise in task.exercises:
        if exercise.name.casefold() == wanted:
            return exercise
    return None


def log_set(
    state: AppState,
    task_id: str,
    *,
    exercise_name: str,
    reps: Any,
    weight: Any = None,
) -> str | None:
    """
    Convenience helper: record one set for an exercise, by name.

    Creates the exercise on the task if it is not there yet (names compare
    case-insensitively). Returns the new set id, or None if the task is gone.
    """
    store = state.store
    task = store.get_task(task_id)
    if task is None:
        return None

    exercise = find_exercise(task, exercise_name)
    exercise_id = exercise.id if exercise is not None else store.add_exercise(task_id, exercise_name)
    if exercise_id is None:
        return None

    set_id = store.add_set(task_id, exercise_id)
    if set_id is None:
        return None
    store.update_set(task_id, exercise_id, set_id, reps=reps, weight=weight)
    logger.debug("Logged set task=%s exercise=%s set=%s", task_id, exercise_id, set_id)
    return set_id


def format_set(index: int, item: ExerciseSet) -> str:
    if item.weight is None:
        return f"set {index}: {item.reps} reps (bodyweight)"
    return f"set {index}: {item.reps} reps x {item.weight:g}"


def format_task_line(state: AppState, task: WorkoutTask) -> str:
    category = state.store.resolve_category(task.category_id)
    mark = "x" if task.completed else " "
    created = task.created_at.astimezone().strftime("%b %d, %Y")
    return f"[{mark}] {task.id[:8]}  {task.title}  <{category.name}>  {created}"


def format_task_detail(state: AppState, task: WorkoutTask) -> str:
    category = state.store.resolve_category(task.category_id)
    lines = [
        format_task_line(state, task),
        f"  id: {task.id}",
        f"  category: {category.name} ({category.color})",
    ]
    if task.details:
        lines.append(f"  details: {task.details}")
    if task.notes:
        lines.append(f"  notes: {task.notes}")
    if not task.exercises:
        lines.append("  no exercises yet")
    for exercise in task.exercises:
        lines.append(f"  - {exercise.name} ({exercise.id[:8]})")
        if not exercise.sets:
            lines.append("      no sets added yet")
        for i, item in enumerate(exercise.sets, start=1):
            lines.append(f"      {format_set(i, item)}")
    return "\n".join(lines)
