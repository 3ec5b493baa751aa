"""
Storage layer: JSON documents on disk and the persisted key-value state.

Components:
- json_store: async read/write/list/remove primitives with schema validation
- SettingsStore: JSON-file key-value store (get/set/delete/clear)
- LibraryRegistry: registered library roots and the slug index
"""

from noggin.storage import json_store
from noggin.storage.registry import LibraryRegistry
from noggin.storage.settings_store import SettingsStore

__all__ = [
    "json_store",
    "LibraryRegistry",
    "SettingsStore",
]
