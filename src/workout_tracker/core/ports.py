# src/workout_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a Protocol for persistence instead of a concrete backend,
and the console layer depends on WorkoutRepo instead of the concrete store.
This keeps storage swappable and makes testing easier.
"""

from typing import Any, Protocol


class KeyValueStorage(Protocol):
    """
    String-valued durable key-value storage (browser localStorage semantics).

    get_item returns None when the key has never been written.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class WorkoutRepo(Protocol):
    # Tasks
    def add_task(
            self,
            *,
            title: str,
            category_id: str,
            completed: bool = False,
            details: str | None = None,
            notes: str | None = None,
            exercises: Any = (),
    ) -> str: ...
    def toggle_complete(self, task_id: str) -> None: ...
    def delete_task(self, task_id: str) -> None: ...
    def update_task(self, task_id: str, **fields: Any) -> None: ...

    # Categories
    def add_category(self, name: str, color: str) -> str: ...
    def update_category(self, category_id: str, **fields: Any) -> None: ...
    def delete_category(self, category_id: str) -> None: ...

    # Exercises / sets
    def add_exercise(self, task_id: str, name: str) -> str | None: ...
    def delete_exercise(self, task_id: str, exercise_id: str) -> None: ...
    def add_set(self, task_id: str, exercise_id: str) -> str | None: ...
    def update_set(
            self,
            task_id: str,
            exercise_id: str,
            set_id: str,
            *,
            reps: Any = ...,
            weight: Any = ...,
    ) -> None: ...
    def delete_set(self, task_id: str, exercise_id: str, set_id: str) -> None: ...

    # Reads
    def get_filtered_tasks(self, category_id: str | None = None) -> list[Any]: ...
    def get_categories(self) -> list[Any]: ...
    def get_task(self, task_id: str) -> Any | None: ...
    def get_category(self, category_id: str) -> Any | None: ...
    def resolve_category(self, category_id: str) -> Any: ...
