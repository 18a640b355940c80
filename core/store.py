"""Key-value persistence for RepRing.

Each key maps to one JSON document. The store is synchronous and treated as
always consistent; callers save explicitly after each state transition.
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any, Protocol

from core.fileio import read_json, write_json_atomic
from core.workspace import data_dir

LEDGER_KEY = "pushups-daily-v2"
FASTING_KEY = "fasting-v1"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Durable mapping from string key to JSON-serializable value."""

    def get(self, key: str) -> Any:
        """Return the stored value, or None if missing or unreadable."""

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""


class JsonFileStore:
    """Stores each key as <directory>/<key>.json."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any:
        return read_json(self._path(key))

    def set(self, key: str, value: Any) -> None:
        write_json_atomic(self._path(key), value)


class MemoryStore:
    """In-process store; values are deep-copied in and out like a real store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = copy.deepcopy(initial or {})
        self.writes = 0

    def get(self, key: str) -> Any:
        return copy.deepcopy(self.data.get(key))

    def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)
        self.writes += 1


def open_store(root: Path | None = None) -> JsonFileStore:
    """The file store for a workspace."""
    return JsonFileStore(data_dir(root))
