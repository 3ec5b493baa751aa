"""
Core Module - Shared domain models, errors and pure helpers.

Components:
- models: pydantic documents for libraries, modules, quizzes, submissions
- errors: NotFound / Corrupt / IOError taxonomy and domain wraps
- paths: slugify, module id derivation, path normalization, file layout
- dates: clock seam and day arithmetic
"""

from noggin.core.errors import (
    CorruptError,
    LibraryNotFoundError,
    ModNotFoundError,
    ModuleExistsError,
    NogginError,
    NotFoundError,
    QuizNotFoundError,
    StorageIOError,
    SubmissionNotFoundError,
)
from noggin.core.models import (
    LegacyModuleStats,
    Library,
    LibraryMetadata,
    Mod,
    ModuleMetadata,
    ModuleOverview,
    ModuleStats,
    Quiz,
    Submission,
    normalize_stats,
)
from noggin.core.paths import derive_module_id, normalize_path, slugify

__all__ = [
    # Errors
    "NogginError",
    "NotFoundError",
    "LibraryNotFoundError",
    "ModNotFoundError",
    "QuizNotFoundError",
    "SubmissionNotFoundError",
    "CorruptError",
    "StorageIOError",
    "ModuleExistsError",
    # Models
    "Library",
    "LibraryMetadata",
    "Mod",
    "ModuleMetadata",
    "ModuleOverview",
    "ModuleStats",
    "LegacyModuleStats",
    "Quiz",
    "Submission",
    "normalize_stats",
    # Paths
    "slugify",
    "derive_module_id",
    "normalize_path",
]
