"""
Error taxonomy for the storage and scheduling engine.

Low-level store failures (NotFoundError, CorruptError, StorageIOError) are
translated into the domain-specific subclasses wherever a domain concept
exists, so callers see "Quiz not found: <id>" rather than a raw ENOENT.
"""

from __future__ import annotations

from pathlib import Path


class NogginError(Exception):
    """Base class for every error raised by noggin."""


class NotFoundError(NogginError):
    """A file, library, module, quiz or submission does not exist."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


class LibraryNotFoundError(NotFoundError):
    """No registered library has the given slug."""

    def __init__(self, slug: str):
        super().__init__(f"Library not found: {slug}")
        self.slug = slug


class ModNotFoundError(NotFoundError):
    """No module in the library derives to the given id."""

    def __init__(self, module_id: str, library_id: str | None = None):
        message = f"Module not found: {module_id}"
        if library_id is not None:
            message += f" (library {library_id})"
        super().__init__(message)
        self.module_id = module_id
        self.library_id = library_id


class QuizNotFoundError(NotFoundError):
    def __init__(self, quiz_id: str, path: Path | str | None = None):
        super().__init__(f"Quiz not found: {quiz_id}", path)
        self.quiz_id = quiz_id


class SubmissionNotFoundError(NotFoundError):
    def __init__(self, quiz_id: str, attempt: int, path: Path | str | None = None):
        super().__init__(f"Submission not found: {quiz_id}-{attempt}", path)
        self.quiz_id = quiz_id
        self.attempt = attempt


class CorruptError(NogginError):
    """A file exists but is not valid JSON or fails schema validation."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"Corrupt file {path}: {reason}")
        self.path = path
        self.reason = reason


class StorageIOError(NogginError):
    """Permission, disk or transient OS failure while touching a file."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"I/O error on {path}: {reason}")
        self.path = path
        self.reason = reason


class ModuleExistsError(NogginError):
    """A module directory already holds module metadata."""

    def __init__(self, path: Path | str):
        super().__init__(f"Module already exists at {path}")
        self.path = path
