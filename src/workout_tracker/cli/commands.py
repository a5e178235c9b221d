# src/workout_tracker/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from ..core.errors import ValidationError
from ..core.state import AppState
from ..tasks.task_api import find_exercise, format_set, format_task_detail, format_task_line, log_set
from ..tasks.task_models import Category, Exercise, WorkoutTask

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_COLOR = "#3b82f6"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_NUMBER = re.compile(r"^-?\d+(?:\.\d+)?$")


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ValidationError as e:
            return f"Invalid input: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument resolution ----


def _match_prefix(ref: str, ids: list[str]) -> str | None:
    if ref in ids:
        return ref
    hits = [i for i in ids if i.startswith(ref)]
    return hits[0] if len(hits) == 1 else None


def _resolve_task(state: AppState, ref: str) -> WorkoutTask | None:
    tasks = state.store.get_filtered_tasks(None)
    task_id = _match_prefix(ref, [t.id for t in tasks])
    return state.store.get_task(task_id) if task_id else None


def _resolve_category(state: AppState, ref: str) -> Category | None:
    categories = state.store.get_categories()
    by_name = [c for c in categories if c.name.casefold() == ref.casefold()]
    if len(by_name) == 1:
        return by_name[0]
    category_id = _match_prefix(ref, [c.id for c in categories])
    return state.store.get_category(category_id) if category_id else None


def _resolve_exercise(task: WorkoutTask, ref: str) -> Exercise | None:
    exercise = find_exercise(task, ref)
    if exercise is not None:
        return exercise
    exercise_id = _match_prefix(ref, [e.id for e in task.exercises])
    for e in task.exercises:
        if e.id == exercise_id:
            return e
    return None


def _no_task(ref: str) -> str:
    return f"No workout matches '{ref}'. Use /list to see ids."


def _no_category(ref: str) -> str:
    return f"No category matches '{ref}'. Use /cats to see categories."


# ---- workouts ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> workouts under the current filter
    /list <cat>    -> set filter to a category and list
    /list all      -> clear the filter
    """
    if args:
        ref = " ".join(args)
        if ref.lower() == "all":
            state.active_filter = None
        else:
            category = _resolve_category(state, ref)
            if category is None:
                return _no_category(ref)
            state.active_filter = category.id

    tasks = state.store.get_filtered_tasks(state.active_filter)
    lines: list[str] = []
    if state.active_filter:
        name = state.store.resolve_category(state.active_filter).name
        lines.append(f"Filtered by: {name} (use /list all to clear)")
    if not tasks:
        lines.append("No workouts yet. Add your first workout!")
    lines.extend(format_task_line(state, t) for t in tasks)
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <workout>"
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])
    return format_task_detail(state, task)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <category> <title...>
    /add <category> <title...> -- <details...>
    """
    usage = "Usage: /add <category> <title...> [-- details...]"
    if len(args) < 2:
        return usage
    category = _resolve_category(state, args[0])
    if category is None:
        return _no_category(args[0])

    rest = args[1:]
    details: str | None = None
    if "--" in rest:
        cut = rest.index("--")
        details = " ".join(rest[cut + 1 :]).strip() or None
        rest = rest[:cut]
    if not rest:
        return usage

    task_id = state.store.add_task(title=" ".join(rest), category_id=category.id, details=details)
    return f"Added workout {task_id[:8]} in {category.name}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <workout>"
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])
    state.store.toggle_complete(task.id)
    return f"Marked '{task.title}' as {'not done' if task.completed else 'done'}."


def cmd_del(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <workout>"
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])
    state.store.delete_task(task.id)
    return f"Deleted '{task.title}'."


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <workout> <new title...>"
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])
    state.store.update_task(task.id, title=" ".join(args[1:]))
    return "Title updated."


def _set_text_field(state: AppState, args: list[str], field: str, label: str) -> str:
    if not args:
        return f"Usage: /{label} <workout> [text...]  (no text clears it)"
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])
    text = " ".join(args[1:]).strip() or None
    state.store.update_task(task.id, **{field: text})
    return f"{label.capitalize()} {'updated' if text else 'cleared'}."


def cmd_details(state: AppState, args: list[str]) -> str:
    return _set_text_field(state, args, "details", "details")


def cmd_note(state: AppState, args: list[str]) -> str:
    return _set_text_field(state, args, "notes", "note")


# ---- categories ----


def cmd_cats(state: AppState, args: list[str]) -> str:
    categories = state.store.get_categories()
    if not categories:
        return "No categories. Add one with /cat add <name> [color]."
    lines = ["Categories:"]
    for c in categories:
        lines.append(f"  {c.id[:8]}  {c.name}  {c.color}")
    return "\n".join(lines)


def cmd_cat(state: AppState, args: list[str]) -> str:
    """
    /cat add <name> [#color]
    /cat rename <category> <name...>
    /cat color <category> <#color>
    /cat del <category>
    """
    usage = (
        "Usage:\n"
        "  /cat add <name> [#color]\n"
        "  /cat rename <category> <name...>\n"
        "  /cat color <category> <#color>\n"
        "  /cat del <category>"
    )
    if not args:
        return usage

    sub = args[0].lower()
    rest = args[1:]

    if sub == "add":
        if not rest:
            return usage
        color = DEFAULT_CATEGORY_COLOR
        if len(rest) > 1 and _HEX_COLOR.match(rest[-1]):
            color = rest[-1]
            rest = rest[:-1]
        name = " ".join(rest)
        category_id = state.store.add_category(name, color)
        return f"Added category {name} ({category_id[:8]})."

    if sub in ("rename", "color", "del"):
        if not rest:
            return usage
        category = _resolve_category(state, rest[0])
        if category is None:
            return _no_category(rest[0])

        if sub == "del":
            state.store.delete_category(category.id)
            return f"Deleted category {category.name}. Its workouts now show as Unknown."

        if len(rest) < 2:
            return usage

        if sub == "rename":
            state.store.update_category(category.id, name=" ".join(rest[1:]))
            return "Category renamed."

        if not _HEX_COLOR.match(rest[1]):
            return f"Not a hex color: {rest[1]}"
        state.store.update_category(category.id, color=rest[1])
        return "Category color updated."

    return usage


# ---- exercises / sets ----


def cmd_ex(state: AppState, args: list[str]) -> str:
    """
    /ex add <workout> <name...>
    /ex del <workout> <exercise...>
    """
    usage = "Usage:\n  /ex add <workout> <name...>\n  /ex del <workout> <exercise...>"
    if len(args) < 3 or args[0].lower() not in ("add", "del"):
        return usage

    task = _resolve_task(state, args[1])
    if task is None:
        return _no_task(args[1])
    ref = " ".join(args[2:])

    if args[0].lower() == "add":
        state.store.add_exercise(task.id, ref)
        return f"Added exercise {ref.strip()}."

    exercise = _resolve_exercise(task, ref)
    if exercise is None:
        return f"No exercise matches '{ref}'."
    state.store.delete_exercise(task.id, exercise.id)
    return f"Deleted exercise {exercise.name}."


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set <workout> <exercise...> <reps> [weight]

    The exercise is created when missing. Weight is optional (bodyweight).
    """
    usage = "Usage: /set <workout> <exercise...> <reps> [weight]"
    if len(args) < 3:
        return usage
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])

    rest = args[1:]
    weight: str | None = None
    if len(rest) >= 3 and _NUMBER.match(rest[-1]) and _NUMBER.match(rest[-2]):
        weight = rest[-1]
        rest = rest[:-1]
    if len(rest) < 2 or not _NUMBER.match(rest[-1]):
        return usage
    reps = rest[-1]
    name = " ".join(rest[:-1])

    set_id = log_set(state, task.id, exercise_name=name, reps=reps, weight=weight)
    if set_id is None:
        return _no_task(args[0])

    updated = state.store.get_task(task.id)
    exercise = find_exercise(updated, name) if updated else None
    if exercise is None:
        return "Set recorded."
    return f"{exercise.name}: {format_set(len(exercise.sets), exercise.sets[-1])}"


def cmd_rmset(state: AppState, args: list[str]) -> str:
    usage = "Usage: /rmset <workout> <exercise...> <set number>"
    if len(args) < 3 or not args[-1].isdigit():
        return usage
    task = _resolve_task(state, args[0])
    if task is None:
        return _no_task(args[0])
    ref = " ".join(args[1:-1])
    exercise = _resolve_exercise(task, ref)
    if exercise is None:
        return f"No exercise matches '{ref}'."
    index = int(args[-1])
    if not 1 <= index <= len(exercise.sets):
        return f"{exercise.name} has {len(exercise.sets)} set(s)."
    state.store.delete_set(task.id, exercise.id, exercise.sets[index - 1].id)
    return f"Deleted set {index} of {exercise.name}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List workouts: /list [category|all].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show a workout with exercises and sets.")
registry.register("add", cmd_add, help_text="Add a workout: /add <category> <title...> [-- details].")
registry.register("done", cmd_done, help_text="Toggle a workout complete: /done <workout>.")
registry.register("del", cmd_del, help_text="Delete a workout: /del <workout>.")
registry.register("edit", cmd_edit, help_text="Rename a workout: /edit <workout> <title...>.")
registry.register("details", cmd_details, help_text="Set or clear details: /details <workout> [text].")
registry.register("note", cmd_note, help_text="Set or clear notes: /note <workout> [text].", aliases=["notes"])
registry.register("cats", cmd_cats, help_text="List categories.")
registry.register("cat", cmd_cat, help_text="Manage categories: /cat add|rename|color|del.")
registry.register("ex", cmd_ex, help_text="Manage exercises: /ex add|del <workout> <name>.")
registry.register("set", cmd_set, help_text="Log a set: /set <workout> <exercise> <reps> [weight].")
registry.register("rmset", cmd_rmset, help_text="Delete a set: /rmset <workout> <exercise> <n>.")
