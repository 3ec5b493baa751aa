"""
Module Storage Service.

Reads and writes a module's documents, addressed by the module directory:

    <module>/.mod/meta.json
    <module>/.mod/stats.json
    <module>/.mod/quizzes/<quizId>.json
    <module>/.mod/submissions/<quizId>-<attempt>.json
    <module>/*.{txt,pdf,md}          (sources)

Leniency policy: inside one module, every document is required to parse. A
missing quizzes/ or submissions/ directory is just an empty list, but one
corrupt quiz or submission fails the whole aggregate read. Skipping broken
modules is the job of callers iterating over many of them.
"""

from __future__ import annotations

import asyncio
import re
from datetime import datetime
from pathlib import Path

from loguru import logger

from noggin.core.dates import utc_now
from noggin.core.errors import NotFoundError, QuizNotFoundError, SubmissionNotFoundError
from noggin.core.models import (
    Mod,
    ModuleMetadata,
    ModuleStats,
    Quiz,
    StoredModuleStats,
    Submission,
    normalize_stats,
)
from noggin.core.paths import (
    attempt_pattern,
    derive_module_id,
    module_data_dir,
    module_metadata_path,
    module_stats_path,
    quiz_path,
    quizzes_dir,
    submission_path,
    submissions_dir,
)
from noggin.storage import json_store

DEFAULT_SOURCE_EXTENSIONS = (".txt", ".pdf", ".md")


def default_stats(module_id: str, now: datetime | None = None) -> ModuleStats:
    """Stats for a module never reviewed: box 1, due immediately."""
    return ModuleStats(module_id=module_id, current_box=1, next_review_date=now or utc_now())


class ModuleStorage:
    """Path-addressed persistence for module aggregates."""

    def __init__(self, source_extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS):
        self.source_extensions = tuple(ext.lower() for ext in source_extensions)

    # =========================================================================
    # Structure
    # =========================================================================

    async def ensure_module_directories(self, module_path: str | Path) -> None:
        await json_store.ensure_dir(quizzes_dir(module_path))
        await json_store.ensure_dir(submissions_dir(module_path))

    async def remove_module(self, module_path: str | Path) -> None:
        await json_store.remove_tree(module_path)
        logger.info(f"Removed module at {module_path}")

    # =========================================================================
    # Metadata & Stats
    # =========================================================================

    async def read_metadata(self, module_path: str | Path) -> ModuleMetadata:
        return await json_store.read_typed(module_metadata_path(module_path), ModuleMetadata)

    async def write_metadata(self, module_path: str | Path, metadata: ModuleMetadata) -> None:
        await json_store.write_typed(module_metadata_path(module_path), metadata)

    async def read_stats(
        self,
        module_path: str | Path,
        module_id: str | None = None,
    ) -> ModuleStats:
        """
        Read a module's stats, normalizing legacy documents.

        If no stats file exists yet, default stats (box 1, due now) are
        written and returned. Corrupt stats are an error.

        Args:
            module_path: Module directory
            module_id: Id recorded in default stats (derived from metadata if None)
        """
        stats_path = module_stats_path(module_path)
        try:
            stored = await json_store.read_typed(stats_path, StoredModuleStats)
        except NotFoundError:
            if module_id is None:
                metadata = await self.read_metadata(module_path)
                module_id = derive_module_id(metadata.slug, metadata.created_at)
            stats = default_stats(module_id)
            await json_store.write_typed(stats_path, stats)
            logger.debug(f"Created default stats for {module_id}")
            return stats
        return normalize_stats(stored)

    async def write_stats(self, module_path: str | Path, stats: ModuleStats) -> None:
        """Persist stats (always in the current single-date form)."""
        await json_store.write_typed(module_stats_path(module_path), normalize_stats(stats))

    # =========================================================================
    # Aggregate
    # =========================================================================

    async def read_sources(self, module_path: str | Path) -> list[str]:
        files = await json_store.list_matching(module_path, "*")
        return [
            str(f)
            for f in files
            if f.suffix.lower() in self.source_extensions and not f.name.startswith(".")
        ]

    async def read_quizzes(self, module_path: str | Path) -> list[Quiz]:
        files = await json_store.list_matching(quizzes_dir(module_path), "*.json")
        return list(await asyncio.gather(*(json_store.read_typed(f, Quiz) for f in files)))

    async def read_submissions(self, module_path: str | Path) -> list[Submission]:
        files = await json_store.list_matching(submissions_dir(module_path), "*.json")
        return list(
            await asyncio.gather(*(json_store.read_typed(f, Submission) for f in files))
        )

    async def read_aggregate(self, module_path: str | Path) -> Mod:
        """
        Load metadata, then sources, quizzes, submissions and stats.

        Metadata is read first; the other four load concurrently.
        """
        metadata = await self.read_metadata(module_path)
        module_id = derive_module_id(metadata.slug, metadata.created_at)

        sources, quizzes, submissions, stats = await asyncio.gather(
            self.read_sources(module_path),
            self.read_quizzes(module_path),
            self.read_submissions(module_path),
            self.read_stats(module_path, module_id),
        )
        return Mod(
            metadata=metadata,
            stats=stats,
            sources=sources,
            quizzes=quizzes,
            submissions=submissions,
        )

    async def write_aggregate(self, module_path: str | Path, mod: Mod) -> None:
        """
        Write metadata, every quiz and every submission.

        Sources are never written here (they are copied and deleted through
        ``copy_source_file``/``delete_source_file``), and stats belong to the
        scheduler.
        """
        await self.ensure_module_directories(module_path)
        await self.write_metadata(module_path, mod.metadata)
        await asyncio.gather(
            *(self.write_quiz(module_path, quiz) for quiz in mod.quizzes),
            *(self.write_submission(module_path, sub) for sub in mod.submissions),
        )
        logger.debug(
            f"Wrote module {mod.metadata.slug}: {len(mod.quizzes)} quizzes, "
            f"{len(mod.submissions)} submissions"
        )

    # =========================================================================
    # Quizzes
    # =========================================================================

    async def write_quiz(self, module_path: str | Path, quiz: Quiz) -> None:
        await json_store.write_typed(quiz_path(module_path, quiz.id), quiz)

    async def read_quiz(self, module_path: str | Path, quiz_id: str) -> Quiz:
        path = quiz_path(module_path, quiz_id)
        try:
            return await json_store.read_typed(path, Quiz)
        except NotFoundError as e:
            raise QuizNotFoundError(quiz_id, path) from e

    async def delete_quiz(self, module_path: str | Path, quiz_id: str) -> None:
        path = quiz_path(module_path, quiz_id)
        try:
            await json_store.remove_file(path)
        except FileNotFoundError as e:
            raise QuizNotFoundError(quiz_id, path) from e
        logger.info(f"Deleted quiz {quiz_id} from {module_path}")

    # =========================================================================
    # Submissions
    # =========================================================================

    async def write_submission(self, module_path: str | Path, submission: Submission) -> None:
        path = submission_path(module_path, submission.quiz_id, submission.attempt_number)
        await json_store.write_typed(path, submission)

    async def read_submission(
        self, module_path: str | Path, quiz_id: str, attempt: int
    ) -> Submission:
        path = submission_path(module_path, quiz_id, attempt)
        try:
            return await json_store.read_typed(path, Submission)
        except NotFoundError as e:
            raise SubmissionNotFoundError(quiz_id, attempt, path) from e

    async def _attempt_files(self, module_path: str | Path, quiz_id: str) -> list[Path]:
        files = await json_store.list_matching(
            submissions_dir(module_path), attempt_pattern(quiz_id)
        )
        # "quiz-1-*.json" would also match quiz "quiz-1-b"; keep numeric attempts only
        attempt = re.compile(rf"^{re.escape(quiz_id)}-\d+\.json$")
        return [f for f in files if attempt.match(f.name)]

    async def count_attempts(self, module_path: str | Path, quiz_id: str) -> int:
        """Number of submission files for a quiz (0 without a submissions dir)."""
        return len(await self._attempt_files(module_path, quiz_id))

    async def list_submissions(
        self, module_path: str | Path, quiz_id: str | None = None
    ) -> list[Submission]:
        """Submissions of a module (or of one quiz), newest first."""
        if quiz_id is None:
            submissions = await self.read_submissions(module_path)
        else:
            files = await self._attempt_files(module_path, quiz_id)
            submissions = list(
                await asyncio.gather(*(json_store.read_typed(f, Submission) for f in files))
            )
        return sorted(submissions, key=lambda s: s.completed_at, reverse=True)

    # =========================================================================
    # Sources
    # =========================================================================

    async def copy_source_file(self, module_path: str | Path, source_file: str | Path) -> str:
        """Copy a file into the module root; returns the new path."""
        target = await json_store.copy_file(source_file, module_path)
        logger.info(f"Added source {target.name} to {module_path}")
        return str(target)

    async def delete_source_file(self, source_path: str | Path) -> None:
        await json_store.remove_file(source_path)
        logger.info(f"Deleted source {source_path}")

    async def has_module(self, module_path: str | Path) -> bool:
        return await json_store.exists(module_data_dir(module_path))
