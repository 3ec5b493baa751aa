"""
Library registry: which library roots this user has, and their slugs.

State lives in the settings store under two keys:
- ``userSettings.libraryPaths``: registered roots, in registration order
- ``libraryIndex``: library slug -> root path

The registry records intent only. It never checks that a path exists;
consumers skip roots whose metadata cannot be read.
"""

from __future__ import annotations

import posixpath
from pathlib import Path

from loguru import logger

from noggin.core.paths import normalize_path, slugify
from noggin.storage.settings_store import SettingsStore

USER_SETTINGS_KEY = "userSettings"
LIBRARY_PATHS_KEY = "libraryPaths"
LIBRARY_INDEX_KEY = "libraryIndex"


class LibraryRegistry:
    """Registered library roots plus the slug index, backed by a SettingsStore."""

    def __init__(self, store: SettingsStore):
        self.store = store

    # =========================================================================
    # Reads
    # =========================================================================

    def library_paths(self) -> list[str]:
        settings = self.store.get(USER_SETTINGS_KEY, {})
        return list(settings.get(LIBRARY_PATHS_KEY, []))

    def slug_index(self) -> dict[str, str]:
        return dict(self.store.get(LIBRARY_INDEX_KEY, {}))

    def exists(self, path: str | Path) -> bool:
        return normalize_path(path) in self.library_paths()

    def resolve_slug(self, slug: str) -> str | None:
        return self.slug_index().get(slug)

    # =========================================================================
    # Writes
    # =========================================================================

    def register(self, path: str | Path, slug: str | None = None) -> bool:
        """
        Register a library root.

        Args:
            path: Library root directory
            slug: Public identifier; defaults to the slug of the directory name

        Returns:
            False if the path was already registered (nothing changes)
        """
        normalized = normalize_path(path)
        paths = self.library_paths()
        if normalized in paths:
            logger.debug(f"Library already registered: {normalized}")
            return False

        slug = slug or slugify(posixpath.basename(normalized))

        settings = self.store.get(USER_SETTINGS_KEY, {})
        settings[LIBRARY_PATHS_KEY] = [*paths, normalized]
        self.store.set(USER_SETTINGS_KEY, settings)

        index = self.slug_index()
        if slug in index and index[slug] != normalized:
            logger.warning(f"Library slug '{slug}' re-pointed from {index[slug]} to {normalized}")
        index[slug] = normalized
        self.store.set(LIBRARY_INDEX_KEY, index)

        logger.info(f"Registered library '{slug}' at {normalized}")
        return True

    def unregister(self, path: str | Path) -> bool:
        """
        Remove a library root and every slug pointing at it.

        Returns:
            True if the path or any index entry was removed
        """
        normalized = normalize_path(path)

        paths = self.library_paths()
        remaining = [p for p in paths if p != normalized]
        removed = len(remaining) != len(paths)
        if removed:
            settings = self.store.get(USER_SETTINGS_KEY, {})
            settings[LIBRARY_PATHS_KEY] = remaining
            self.store.set(USER_SETTINGS_KEY, settings)

        index = self.slug_index()
        kept = {slug: p for slug, p in index.items() if normalize_path(p) != normalized}
        if len(kept) != len(index):
            self.store.set(LIBRARY_INDEX_KEY, kept)
            removed = True

        if removed:
            logger.info(f"Unregistered library at {normalized}")
        else:
            logger.warning(f"Library not registered, nothing to unregister: {normalized}")
        return removed
