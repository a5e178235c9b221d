# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class InMemoryStorage:
    """
    Dict-backed KeyValueStorage for unit tests.

    - Keeps raw strings exactly as the store wrote them
    - Counts writes per key for write-through assertions
    """

    items: dict[str, str] = field(default_factory=dict)
    writes: dict[str, int] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
        self.writes[key] = self.writes.get(key, 0) + 1

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FailingStorage(InMemoryStorage):
    """Storage whose writes always fail (disk full, read-only dir, ...)."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")
