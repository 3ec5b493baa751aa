"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
Every test that touches the file system works under ``tmp_path``.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from noggin.core.models import (  # noqa: E402
    Choice,
    GradedResponse,
    ModuleMetadata,
    MultipleChoiceQuestion,
    PendingResponse,
    Quiz,
    Submission,
    WrittenQuestion,
)
from noggin.core.paths import derive_module_id  # noqa: E402
from noggin.services.library_service import LibraryService  # noqa: E402
from noggin.services.module_discovery import ModuleDiscoveryService  # noqa: E402
from noggin.services.module_service import ModuleService  # noqa: E402
from noggin.services.module_storage import ModuleStorage  # noqa: E402
from noggin.services.practice_feed import PracticeFeedService  # noqa: E402
from noggin.storage.registry import LibraryRegistry  # noqa: E402
from noggin.storage.settings_store import SettingsStore  # noqa: E402

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (real files under tmp_path)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed 'current time' used across scheduling tests."""
    return NOW


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def settings_store(tmp_path):
    """Settings store backed by a file in a temp data dir."""
    return SettingsStore(tmp_path / "data" / "settings.json").load()


@pytest.fixture
def registry(settings_store):
    return LibraryRegistry(settings_store)


@pytest.fixture
def library_service(registry):
    return LibraryService(registry)


@pytest.fixture
def discovery(library_service):
    return ModuleDiscoveryService(library_service)


@pytest.fixture
def module_storage():
    return ModuleStorage()


@pytest.fixture
def module_service(library_service, discovery, module_storage):
    return ModuleService(library_service, discovery, module_storage)


@pytest.fixture
def practice_feed(library_service, discovery, module_service, now):
    return PracticeFeedService(library_service, discovery, module_service, clock=lambda: now)


# =============================================================================
# Sample documents
# =============================================================================


@pytest.fixture
def sample_module_metadata(tmp_path):
    """Provide module metadata for a module directory under tmp_path."""
    created = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
    return ModuleMetadata(
        id=derive_module_id("intro-to-rust", created),
        title="Intro to Rust",
        slug="intro-to-rust",
        overview="Ownership, borrowing and lifetimes",
        library_id="rust",
        created_at=created,
        updated_at=created,
        path=str(tmp_path / "lib" / "intro-to-rust"),
    )


@pytest.fixture
def sample_quiz():
    """Provide a sample quiz with one question of each type."""
    return Quiz(
        id="quiz-1",
        title="Ownership basics",
        time_limit=600,
        sources=["ownership.md"],
        questions=[
            MultipleChoiceQuestion(
                question="Which keyword moves a value into a closure?",
                choices=[Choice(option_text="move"), Choice(option_text="ref")],
            ),
            WrittenQuestion(question="Explain the borrow checker in one sentence."),
        ],
        created_at=datetime(2024, 1, 2, 9, 0, 0, tzinfo=timezone.utc),
    )


def make_submission(
    quiz,
    attempt=1,
    completed_at=NOW,
    grade=None,
    library_id="rust",
    module_slug="intro-to-rust",
):
    """Build a submission answering every question of ``quiz``."""
    common = {"quiz_id": quiz.id, "submission_id": attempt, "created_at": completed_at}
    if grade is None:
        responses = [
            PendingResponse(question=q, student_answer="an answer", **common)
            for q in quiz.questions
        ]
        status = "pending"
    else:
        responses = [
            GradedResponse(
                question=q,
                student_answer="an answer",
                correct_answer="the answer",
                verdict="pass",
                **common,
            )
            for q in quiz.questions
        ]
        status = "graded"
    return Submission(
        quiz_id=quiz.id,
        attempt_number=attempt,
        quiz_title=quiz.title,
        library_id=library_id,
        module_slug=module_slug,
        completed_at=completed_at,
        time_elapsed=120.5,
        time_limit=quiz.time_limit,
        status=status,
        grade=grade,
        responses=responses,
    )


@pytest.fixture
def submission_factory():
    """Expose ``make_submission`` to tests as a fixture."""
    return make_submission
