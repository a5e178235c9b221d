# tests/test_commands.py

from __future__ import annotations

from workout_tracker.cli.commands import CommandRegistry, registry
from workout_tracker.core.errors import ValidationError


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("alpha", handler, "alpha", aliases=["al"])

    assert reg.handle(state, "/alpha x y") == "a:x,y"
    assert reg.handle(state, "/AL") == "a:"
    assert called["a"] == 2
    assert "/alpha - alpha" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_validation_errors_become_replies(state) -> None:
    reg = CommandRegistry()

    def bad(state, args):
        raise ValidationError("title is required")

    reg.register("bad", bad, "bad")
    assert reg.handle(state, "/bad") == "Invalid input: title is required"


def test_add_list_done_delete_flow(state) -> None:
    reply = registry.handle(state, "/add strength Leg Day")
    assert reply is not None and reply.startswith("Added workout")

    task = state.store.get_filtered_tasks()[0]
    assert task.title == "Leg Day"
    assert task.category_id == "2"

    listing = registry.handle(state, "/list")
    assert "Leg Day" in listing and "<Strength>" in listing

    registry.handle(state, f"/done {task.id[:6]}")
    assert state.store.get_task(task.id).completed is True

    registry.handle(state, f"/del {task.id}")
    assert state.store.get_task(task.id) is None
    assert "No workouts yet" in registry.handle(state, "/list")


def test_add_with_unknown_category(state) -> None:
    assert "No category matches" in registry.handle(state, "/add Pilates Core")
    assert state.store.get_filtered_tasks() == []


def test_list_filter_sticks_until_cleared(state) -> None:
    registry.handle(state, "/add cardio Run")
    registry.handle(state, "/add flexibility Stretch")

    filtered = registry.handle(state, "/list cardio")
    assert "Filtered by: Cardio" in filtered
    assert "Run" in filtered and "Stretch" not in filtered
    assert state.active_filter == "1"

    assert "Stretch" not in registry.handle(state, "/list")

    everything = registry.handle(state, "/list all")
    assert state.active_filter is None
    assert "Run" in everything and "Stretch" in everything


def test_details_and_notes_set_and_clear(state) -> None:
    task_id = state.store.add_task(title="Row", category_id="1")

    registry.handle(state, f"/details {task_id} 5k steady")
    registry.handle(state, f"/note {task_id} felt good")
    task = state.store.get_task(task_id)
    assert (task.details, task.notes) == ("5k steady", "felt good")

    assert registry.handle(state, f"/note {task_id}") == "Note cleared."
    assert state.store.get_task(task_id).notes is None
    assert state.store.get_task(task_id).details == "5k steady"


def test_edit_renames_workout(state) -> None:
    task_id = state.store.add_task(title="Row", category_id="1")
    registry.handle(state, f"/edit {task_id} Erg Intervals")
    assert state.store.get_task(task_id).title == "Erg Intervals"


def test_category_commands_and_dangling_display(state) -> None:
    reply = registry.handle(state, "/cat add Yoga #000000")
    assert reply.startswith("Added category Yoga")
    yoga = state.store.get_categories()[-1]
    assert (yoga.name, yoga.color) == ("Yoga", "#000000")

    registry.handle(state, "/cat rename yoga Hot Yoga")
    registry.handle(state, f"/cat color {yoga.id} #ff00ff")
    assert state.store.get_category(yoga.id).name == "Hot Yoga"
    assert state.store.get_category(yoga.id).color == "#ff00ff"

    task_id = state.store.add_task(title="Flow", category_id=yoga.id)
    registry.handle(state, f"/cat del {yoga.id[:8]}")

    assert state.store.get_category(yoga.id) is None
    assert state.store.get_task(task_id).category_id == yoga.id
    assert "<Unknown>" in registry.handle(state, "/list")
    assert "Yoga" not in registry.handle(state, "/cats")


def test_cat_add_uses_default_color(state) -> None:
    registry.handle(state, "/cat add Mobility Work")
    cat = state.store.get_categories()[-1]
    assert (cat.name, cat.color) == ("Mobility Work", "#3b82f6")


def test_exercise_and_set_commands(state) -> None:
    task_id = state.store.add_task(title="Legs", category_id="2")

    assert registry.handle(state, f"/set {task_id} Back Squat 5 100") == (
        "Back Squat: set 1: 5 reps x 100"
    )
    assert registry.handle(state, f"/set {task_id} back squat 3") == (
        "Back Squat: set 2: 3 reps (bodyweight)"
    )
    registry.handle(state, f"/ex add {task_id} Lunge")

    task = state.store.get_task(task_id)
    assert [e.name for e in task.exercises] == ["Back Squat", "Lunge"]
    squat = task.exercises[0]
    assert [(s.reps, s.weight) for s in squat.sets] == [(5, 100.0), (3, None)]

    shown = registry.handle(state, f"/show {task_id}")
    assert "Back Squat" in shown and "no sets added yet" in shown

    assert registry.handle(state, f"/rmset {task_id} Back Squat 1") == "Deleted set 1 of Back Squat."
    assert [s.reps for s in state.store.get_task(task_id).exercises[0].sets] == [3]

    registry.handle(state, f"/ex del {task_id} lunge")
    assert [e.name for e in state.store.get_task(task_id).exercises] == ["Back Squat"]


def test_ex_add_blank_name_is_rejected(state) -> None:
    task_id = state.store.add_task(title="Legs", category_id="2")
    assert registry.handle(state, f"/ex add {task_id}") is not None
    assert state.store.get_task(task_id).exercises == ()


def test_unknown_task_reference(state) -> None:
    assert "No workout matches" in registry.handle(state, "/done zzz")
    assert "No workout matches" in registry.handle(state, "/show zzz")


def test_add_with_details_tail(state) -> None:
    registry.handle(state, "/add cardio Tempo Run -- 8k at threshold")
    task = state.store.get_filtered_tasks()[0]
    assert (task.title, task.details) == ("Tempo Run", "8k at threshold")

    registry.handle(state, "/add cardio Easy Jog --")
    assert state.store.get_filtered_tasks()[0].details is None

    assert registry.handle(state, "/add cardio -- only details").startswith("Usage: /add")
    assert len(state.store.get_filtered_tasks()) == 2
