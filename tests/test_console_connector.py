# tests/test_console_connector.py

from __future__ import annotations

from workout_tracker.connectors.console_connector import run_console_loop


def _scripted(lines: list[str]):
    it = iter(lines)

    def read_line(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read_line


def test_console_runs_commands_until_exit(state) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        read_line=_scripted(["", "/add cardio Morning Run", "hello", "/exit", "/add cardio Never"]),
        write=out.append,
    )

    titles = [t.title for t in state.store.get_filtered_tasks()]
    assert titles == ["Morning Run"]
    assert any(line.startswith("Added workout") for line in out)
    assert any("Commands start with '/'" in line for line in out)


def test_console_stops_on_eof(state) -> None:
    out: list[str] = []
    run_console_loop(state, read_line=_scripted(["/cats"]), write=out.append)
    assert any("Cardio" in line for line in out)
