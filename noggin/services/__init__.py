"""
Services Module - Library, module and practice-feed operations.

Components:
- LibraryService: library CRUD over ``.lib/meta.json``
- ModuleDiscoveryService: scan libraries, resolve module ids to directories
- ModuleStorage: path-addressed module persistence
- ModuleService: id-addressed module operations
- PracticeFeedService: Leitner updates from graded submissions, due feed
- grading: letter grades and grader collaborator protocols
"""

from __future__ import annotations

from dataclasses import dataclass

from noggin.config import Settings, get_settings
from noggin.services.library_service import LibraryService
from noggin.services.module_discovery import ModuleDiscoveryService
from noggin.services.module_service import ModuleService
from noggin.services.module_storage import ModuleStorage
from noggin.services.practice_feed import PracticeFeedService
from noggin.storage import LibraryRegistry, SettingsStore


@dataclass
class Services:
    """Wired service graph sharing one settings store."""

    store: SettingsStore
    registry: LibraryRegistry
    libraries: LibraryService
    discovery: ModuleDiscoveryService
    storage: ModuleStorage
    modules: ModuleService
    practice_feed: PracticeFeedService


def create_services(settings: Settings | None = None) -> Services:
    """Build every service from settings (``get_settings()`` by default)."""
    settings = settings or get_settings()
    store = SettingsStore(settings.settings_path).load()
    registry = LibraryRegistry(store)
    libraries = LibraryService(registry)
    discovery = ModuleDiscoveryService(libraries)
    storage = ModuleStorage(settings.source_extensions)
    modules = ModuleService(libraries, discovery, storage)
    practice_feed = PracticeFeedService(libraries, discovery, modules)
    return Services(
        store=store,
        registry=registry,
        libraries=libraries,
        discovery=discovery,
        storage=storage,
        modules=modules,
        practice_feed=practice_feed,
    )


__all__ = [
    "LibraryService",
    "ModuleDiscoveryService",
    "ModuleService",
    "ModuleStorage",
    "PracticeFeedService",
    "Services",
    "create_services",
]
