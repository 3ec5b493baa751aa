"""
Practice Feed Service.

Connects graded submissions to the Leitner scheduler and builds the list of
modules due for review:

1. A graded submission moves its module between boxes (pass = grade >= 60)
2. ``get_due_modules`` collects every due module across all libraries,
   most urgent first

Submissions completed before the module's last review are ignored, so
re-feeding an old submission never moves a module twice.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable

from loguru import logger

from noggin.core.dates import ensure_utc, utc_now
from noggin.core.errors import NogginError
from noggin.core.models import Mod, ModuleOverview, Submission
from noggin.scheduling.leitner import advance, is_due, priority
from noggin.services.grading import SubmissionGrader, apply_grades, is_passing
from noggin.services.library_service import LibraryService
from noggin.services.module_discovery import ModuleDiscoveryService
from noggin.services.module_service import ModuleService


class PracticeFeedService:
    """Review scheduling and the due-module feed."""

    def __init__(
        self,
        libraries: LibraryService,
        discovery: ModuleDiscoveryService,
        modules: ModuleService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.libraries = libraries
        self.discovery = discovery
        self.modules = modules
        self.clock = clock

    # =========================================================================
    # Scheduling
    # =========================================================================

    async def update_review_schedule(
        self, library_id: str, module_id: str, submission: Submission
    ) -> bool:
        """
        Apply a graded submission to the module's Leitner box.

        Args:
            library_id: Library slug
            module_id: Derived module id
            submission: The submission to apply

        Returns:
            True if the stats were updated; False for ungraded submissions and
            for submissions no newer than the last review
        """
        if not submission.is_graded:
            logger.debug(
                f"Submission {submission.quiz_id}-{submission.attempt_number} not graded, skipping"
            )
            return False

        stats = await self.modules.get_stats(library_id, module_id)
        completed_at = ensure_utc(submission.completed_at)
        if stats.last_review_date is not None and completed_at <= stats.last_review_date:
            logger.debug(
                f"Submission {submission.quiz_id}-{submission.attempt_number} predates "
                f"last review of {module_id}, skipping"
            )
            return False

        passed = is_passing(submission.grade)
        # next review counts from now; last review records the submission time
        updated = advance(stats, passed, self.clock()).model_copy(
            update={"last_review_date": completed_at}
        )
        await self.modules.save_stats(library_id, module_id, updated)

        logger.info(
            f"Module {module_id}: {'pass' if passed else 'fail'} ({submission.grade}), "
            f"box {stats.current_box} -> {updated.current_box}, "
            f"next review {updated.next_review_date:%Y-%m-%d}"
        )
        return True

    async def grade_and_schedule(
        self,
        library_id: str,
        module_id: str,
        submission: Submission,
        grader: SubmissionGrader,
    ) -> Submission:
        """
        Grade a pending submission, store it, then update the schedule.

        Returns:
            The graded submission
        """
        graded = apply_grades(submission, await grader(submission))
        await self.modules.save_submission(library_id, module_id, graded)
        await self.update_review_schedule(library_id, module_id, graded)
        return graded

    # =========================================================================
    # Feed
    # =========================================================================

    async def _load(self, overview: ModuleOverview) -> Mod | None:
        try:
            return await self.modules.read_module(overview.library_slug, overview.id)
        except NogginError as e:
            logger.warning(f"Skipping module {overview.id} in {overview.library_slug}: {e}")
            return None

    async def _library_modules(self, library_id: str) -> list[Mod]:
        try:
            overviews = await self.discovery.get_module_overviews(library_id)
        except NogginError as e:
            logger.warning(f"Skipping library {library_id}: {e}")
            return []
        loaded = await asyncio.gather(*(self._load(overview) for overview in overviews))
        return [mod for mod in loaded if mod is not None]

    async def get_due_modules(self) -> list[Mod]:
        """
        Every module due for review, highest priority first.

        Libraries are visited in registry order; modules of one library are
        loaded concurrently. Modules that fail to load are left out.
        """
        now = self.clock()
        slugs = list(self.libraries.registry.slug_index())

        due: list[Mod] = []
        for library_id in slugs:
            for mod in await self._library_modules(library_id):
                if mod.stats is not None and is_due(mod.stats, now):
                    due.append(mod)

        due.sort(key=lambda mod: priority(mod.stats, now), reverse=True)
        logger.debug(f"{len(due)} modules due for review")
        return due
