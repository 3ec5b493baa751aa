"""
Key-value settings store persisted as a single JSON file.

Backs the library registry and unrelated user settings. The store is an
explicit object: nothing is read from disk until ``load()`` is called, and
every mutation rewrites the whole file (last write wins, no locking).

Default location: ~/.noggin/settings.json
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from noggin.core.errors import CorruptError, StorageIOError

DEFAULTS: dict[str, Any] = {
    "userSettings": {"libraryPaths": []},
    "libraryIndex": {},
}


class SettingsStore:
    """
    Manages the persisted key-value state.

    Handles:
    - userSettings (libraryPaths and anything else the UI keeps there)
    - libraryIndex (library slug -> root path)
    """

    def __init__(self, path: Path, defaults: dict[str, Any] | None = None):
        """
        Args:
            path: JSON file holding the store
            defaults: Values returned for keys missing from the file
        """
        self.path = Path(path)
        self.defaults = copy.deepcopy(DEFAULTS if defaults is None else defaults)
        self._data: dict[str, Any] = {}
        self._loaded = False

    def load(self) -> "SettingsStore":
        """Read the backing file. A missing file starts an empty store."""
        if not self.path.exists():
            self._data = {}
        else:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise CorruptError(self.path, f"invalid JSON ({e.msg})") from e
            except OSError as e:
                raise StorageIOError(self.path, e.strerror or str(e)) from e
            if not isinstance(data, dict):
                raise CorruptError(self.path, "top-level value must be an object")
            self._data = data
        self._loaded = True
        logger.debug(f"SettingsStore loaded from {self.path}")
        return self

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def get(self, key: str, default: Any = None) -> Any:
        """Copy of the stored value, else the store default, else ``default``."""
        self._ensure_loaded()
        if key in self._data:
            return copy.deepcopy(self._data[key])
        if key in self.defaults:
            return copy.deepcopy(self.defaults[key])
        return default

    def set(self, key: str, value: Any) -> None:
        self._ensure_loaded()
        self._data[key] = copy.deepcopy(value)
        self._save()

    def delete(self, key: str) -> None:
        self._ensure_loaded()
        if key in self._data:
            del self._data[key]
            self._save()

    def clear(self) -> None:
        self._data = {}
        self._loaded = True
        self._save()

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise StorageIOError(self.path, e.strerror or str(e)) from e
