"""
Module Discovery Service.

Finds modules inside library roots and resolves a ``(library, module id)``
pair to a directory. There is no index: every lookup re-reads the metadata
of every module in the library and re-derives its id, so hand-renamed or
hand-edited module folders keep resolving.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from noggin.core.errors import NogginError
from noggin.core.models import ModuleMetadata, ModuleOverview
from noggin.core.paths import MODULE_DIR, derive_module_id, module_metadata_path
from noggin.services.library_service import LibraryService
from noggin.storage import json_store


async def scan_library_module_paths(library_path: str | Path) -> list[Path]:
    """
    Module directories directly under a library root.

    A module directory is any first-level subdirectory holding a ``.mod``
    directory. Nested libraries are not searched.
    """
    markers = await json_store.list_matching(library_path, f"*/{MODULE_DIR}")
    return [marker.parent for marker in markers if marker.is_dir()]


async def read_module_metadata(module_path: str | Path) -> ModuleMetadata:
    return await json_store.read_typed(module_metadata_path(module_path), ModuleMetadata)


class ModuleDiscoveryService:
    """Scan and resolve modules across registered libraries."""

    def __init__(self, libraries: LibraryService):
        self.libraries = libraries

    async def get_all_module_paths(self) -> list[Path]:
        """Module directories across every registered library."""
        paths: list[Path] = []
        for library_path in self.libraries.registry.library_paths():
            paths.extend(await scan_library_module_paths(library_path))
        return paths

    async def _read_candidates(
        self, library_id: str
    ) -> list[tuple[Path, ModuleMetadata]]:
        library_path = self.libraries.get_library_path(library_id)
        module_paths = await scan_library_module_paths(library_path)
        logger.debug(f"Found {len(module_paths)} modules in library {library_id}")

        candidates = []
        for module_path in module_paths:
            try:
                candidates.append((module_path, await read_module_metadata(module_path)))
            except NogginError as e:
                logger.warning(f"Failed to read metadata for module at {module_path}: {e}")
        return candidates

    async def resolve_module_path(self, library_id: str, module_id: str) -> Path | None:
        """
        Directory of the module whose derived id equals ``module_id``.

        Raises:
            LibraryNotFoundError: unknown library slug

        Returns:
            None when no module in the library matches
        """
        for module_path, metadata in await self._read_candidates(library_id):
            if derive_module_id(metadata.slug, metadata.created_at) == module_id:
                logger.debug(f"Resolved module {module_id} to {module_path}")
                return module_path

        logger.debug(f"No module {module_id} in library {library_id}")
        return None

    async def get_module_overviews(self, library_id: str) -> list[ModuleOverview]:
        """Overview of every readable module in a library."""
        return [
            ModuleOverview(
                id=derive_module_id(metadata.slug, metadata.created_at),
                slug=metadata.slug,
                display_name=metadata.title,
                library_slug=library_id,
            )
            for _, metadata in await self._read_candidates(library_id)
        ]
