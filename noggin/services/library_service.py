"""
Library Service - CRUD over library metadata files.

A library is a user-chosen root directory with a ``.lib/meta.json`` file.
Libraries are addressed by slug; the registry maps slugs to roots.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger

from noggin.core.dates import utc_now
from noggin.core.errors import LibraryNotFoundError, NogginError
from noggin.core.models import Library, LibraryMetadata
from noggin.core.paths import library_metadata_dir, library_metadata_path, normalize_path, slugify
from noggin.storage import json_store
from noggin.storage.registry import LibraryRegistry


class LibraryService:
    """Create, read, list and delete libraries."""

    def __init__(self, registry: LibraryRegistry):
        self.registry = registry

    async def create(
        self,
        path: str | Path,
        name: str,
        description: str = "",
        created_at: datetime | None = None,
    ) -> Library:
        """
        Create (or adopt) a library root and register it.

        Args:
            path: Library root; created if missing
            name: Display name, also the source of the slug
            description: Free text
            created_at: Creation time (defaults to now)

        Returns:
            The created Library
        """
        root = normalize_path(path)
        metadata = LibraryMetadata(
            name=name,
            description=description,
            slug=slugify(name),
            created_at=created_at or utc_now(),
        )
        await json_store.ensure_dir(library_metadata_dir(root))
        await json_store.write_typed(library_metadata_path(root), metadata)
        self.registry.register(root, metadata.slug)

        logger.info(f"Created library '{metadata.slug}' at {root}")
        return Library(path=root, **metadata.model_dump())

    async def read_path(self, path: str | Path) -> Library:
        """Read the library at a known root (NotFound/Corrupt propagate)."""
        root = normalize_path(path)
        metadata = await json_store.read_typed(library_metadata_path(root), LibraryMetadata)
        return Library(path=root, **metadata.model_dump())

    def get_library_path(self, slug: str) -> str:
        """Root directory for a slug; raises LibraryNotFoundError."""
        path = self.registry.resolve_slug(slug)
        if path is None:
            raise LibraryNotFoundError(slug)
        return path

    async def read(self, slug: str) -> Library:
        return await self.read_path(self.get_library_path(slug))

    async def read_all(self) -> list[Library]:
        """
        Every registered library whose metadata loads.

        A library that fails to load is logged and left out; one broken
        root never fails the whole listing.
        """
        libraries: list[Library] = []
        for path in self.registry.library_paths():
            try:
                libraries.append(await self.read_path(path))
            except NogginError as e:
                logger.warning(f"Skipping library at {path}: {e}")
        return libraries

    async def delete(self, slug: str) -> None:
        """
        Unregister a library and delete its directory tree.

        Unregistering happens first; if it raises, nothing is removed.
        """
        path = self.get_library_path(slug)
        self.registry.unregister(path)
        await json_store.remove_tree(path)
        logger.info(f"Deleted library '{slug}' at {path}")
