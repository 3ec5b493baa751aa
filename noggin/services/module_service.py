"""
Module Service - module operations addressed by (library slug, module id).

Every call resolves the module directory through discovery first and raises
ModNotFoundError when no module in the library derives to the given id.
Persistence itself is delegated to ModuleStorage.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger

from noggin.core.dates import ensure_utc, utc_now
from noggin.core.errors import ModNotFoundError, ModuleExistsError, NogginError, QuizNotFoundError
from noggin.core.models import Mod, ModuleMetadata, ModuleStats, Quiz, Submission
from noggin.core.paths import derive_module_id, module_dir, quizzes_dir, slugify
from noggin.services.library_service import LibraryService
from noggin.services.module_discovery import ModuleDiscoveryService
from noggin.services.module_storage import ModuleStorage, default_stats


class ModuleService:
    """Id-addressed CRUD over modules, quizzes, submissions, stats and sources."""

    def __init__(
        self,
        libraries: LibraryService,
        discovery: ModuleDiscoveryService,
        storage: ModuleStorage,
    ):
        self.libraries = libraries
        self.discovery = discovery
        self.storage = storage

    async def _module_path(self, library_id: str, module_id: str) -> Path:
        path = await self.discovery.resolve_module_path(library_id, module_id)
        if path is None:
            raise ModNotFoundError(module_id, library_id)
        return path

    # =========================================================================
    # Modules
    # =========================================================================

    async def create_module(
        self,
        library_id: str,
        title: str,
        overview: str = "",
        created_at: datetime | None = None,
    ) -> Mod:
        """
        Create a module directory named by the title's slug.

        Args:
            library_id: Slug of the owning library
            title: Module title
            overview: Free-text summary
            created_at: Creation time (defaults to now)

        Returns:
            The new module with default stats (box 1, due immediately)

        Raises:
            LibraryNotFoundError: unknown library
            ModuleExistsError: the directory already holds a module
            ValueError: the title has nothing to slugify
        """
        slug = slugify(title)
        if not slug:
            raise ValueError(f"Cannot derive a module slug from title {title!r}")

        library_path = self.libraries.get_library_path(library_id)
        module_path = module_dir(library_path, slug)
        if await self.storage.has_module(module_path):
            raise ModuleExistsError(module_path)

        now = ensure_utc(created_at or utc_now())
        module_id = derive_module_id(slug, now)
        metadata = ModuleMetadata(
            id=module_id,
            title=title,
            slug=slug,
            overview=overview,
            library_id=library_id,
            created_at=now,
            updated_at=now,
            path=str(module_path),
        )
        stats = default_stats(module_id, now)
        mod = Mod(metadata=metadata, stats=stats)

        await self.storage.write_aggregate(module_path, mod)
        await self.storage.write_stats(module_path, stats)

        logger.info(f"Created module {module_id} in library {library_id}")
        return mod

    async def read_module(self, library_id: str, module_id: str) -> Mod:
        return await self.storage.read_aggregate(await self._module_path(library_id, module_id))

    async def delete_module(self, library_id: str, module_id: str) -> None:
        module_path = await self._module_path(library_id, module_id)
        await self.storage.remove_module(module_path)
        logger.info(f"Deleted module {module_id} from library {library_id}")

    # =========================================================================
    # Stats
    # =========================================================================

    async def get_stats(self, library_id: str, module_id: str) -> ModuleStats:
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.read_stats(module_path, module_id)

    async def save_stats(self, library_id: str, module_id: str, stats: ModuleStats) -> None:
        module_path = await self._module_path(library_id, module_id)
        await self.storage.write_stats(module_path, stats)

    async def get_all_module_stats(self) -> list[ModuleStats]:
        """
        Stats of every module in every registered library.

        Modules whose metadata or stats cannot be read are logged and skipped.
        """
        results: list[ModuleStats] = []
        for module_path in await self.discovery.get_all_module_paths():
            try:
                results.append(await self.storage.read_stats(module_path))
            except NogginError as e:
                logger.warning(f"Skipping stats for module at {module_path}: {e}")
        return results

    # =========================================================================
    # Quizzes
    # =========================================================================

    async def save_quiz(self, library_id: str, module_id: str, quiz: Quiz) -> None:
        module_path = await self._module_path(library_id, module_id)
        await self.storage.write_quiz(module_path, quiz)
        logger.info(f"Saved quiz {quiz.id} to module {module_id}")

    async def read_quiz(self, library_id: str, module_id: str, quiz_id: str) -> Quiz:
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.read_quiz(module_path, quiz_id)

    async def delete_quiz(self, library_id: str, module_id: str, quiz_id: str) -> None:
        module_path = await self._module_path(library_id, module_id)
        await self.storage.delete_quiz(module_path, quiz_id)

    async def get_latest_quiz(self, library_id: str, module_id: str) -> Quiz:
        """Most recently created quiz; QuizNotFoundError if the module has none."""
        module_path = await self._module_path(library_id, module_id)
        quizzes = await self.storage.read_quizzes(module_path)
        if not quizzes:
            raise QuizNotFoundError("latest", quizzes_dir(module_path))
        return max(quizzes, key=lambda q: q.created_at)

    # =========================================================================
    # Submissions
    # =========================================================================

    async def save_submission(
        self, library_id: str, module_id: str, submission: Submission
    ) -> None:
        module_path = await self._module_path(library_id, module_id)
        await self.storage.write_submission(module_path, submission)
        logger.info(
            f"Saved submission {submission.quiz_id}-{submission.attempt_number} "
            f"to module {module_id}"
        )

    async def read_submission(
        self, library_id: str, module_id: str, quiz_id: str, attempt: int
    ) -> Submission:
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.read_submission(module_path, quiz_id, attempt)

    async def get_attempt_count(self, library_id: str, module_id: str, quiz_id: str) -> int:
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.count_attempts(module_path, quiz_id)

    async def get_quiz_submissions(
        self, library_id: str, module_id: str, quiz_id: str
    ) -> list[Submission]:
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.list_submissions(module_path, quiz_id)

    async def get_module_submissions(self, library_id: str, module_id: str) -> list[Submission]:
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.list_submissions(module_path)

    # =========================================================================
    # Sources
    # =========================================================================

    async def add_source(self, library_id: str, module_id: str, source_file: str | Path) -> str:
        """Copy a file into the module; returns its new path."""
        module_path = await self._module_path(library_id, module_id)
        return await self.storage.copy_source_file(module_path, source_file)

    async def remove_source(self, library_id: str, module_id: str, source_name: str) -> None:
        """Delete a source file by name (directory parts are ignored)."""
        module_path = await self._module_path(library_id, module_id)
        await self.storage.delete_source_file(module_path / Path(source_name).name)
