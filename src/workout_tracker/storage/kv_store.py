# src/workout_tracker/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage:
    """
    File-backed key-value storage.

    Layout:
    - one file per key: <root>/<key>.json
    - the stored value is the raw string given to set_item (JSON text in practice)

    Writes are atomic: a sibling .tmp file is written and then os.replace()d over
    the target, so a crash mid-write leaves the previous value intact.
    """

    def __init__(self, root_dir: str | Path = ".local/workout/storage") -> None:
        self._root = Path(root_dir)
        self._root.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileStorage ready root=%s", self._root)

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        if not key or not _KEY_RE.match(key) or key.startswith("."):
            raise ValueError(f"invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text("utf-8")
        except (OSError, UnicodeDecodeError):
            logger.exception("Failed to read storage key=%s path=%s", key, path)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(OSError):
            # Best-effort: keep the user's data private on disk.
            os.chmod(path, 0o600)
        logger.debug("Stored key=%s bytes=%d", key, len(value))

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        with contextlib.suppress(FileNotFoundError):
            path.unlink()
            logger.debug("Removed key=%s", key)
