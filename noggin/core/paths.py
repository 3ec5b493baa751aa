"""
Slug, identifier and path helpers.

Everything here is pure. On-disk layout of a library root:

    <library>/.lib/meta.json
    <library>/<module-slug>/.mod/meta.json
    <library>/<module-slug>/.mod/stats.json
    <library>/<module-slug>/.mod/quizzes/<quizId>.json
    <library>/<module-slug>/.mod/submissions/<quizId>-<attempt>.json
    <library>/<module-slug>/*.{txt,pdf,...}
"""

from __future__ import annotations

import glob
import posixpath
import re
from datetime import datetime
from pathlib import Path

from noggin.core.dates import parse_timestamp

LIBRARY_DIR = ".lib"
MODULE_DIR = ".mod"
METADATA_FILE = "meta.json"
STATS_FILE = "stats.json"
QUIZZES_DIR = "quizzes"
SUBMISSIONS_DIR = "submissions"

MAX_SLUG_LENGTH = 255

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:(/|$)")


def slugify(name: str) -> str:
    """
    Turn a human title into a file-safe slug.

    Words are split on whitespace, stripped of anything that is not ASCII
    alphanumeric, lowercased and joined with hyphens:

        >>> slugify("  C++ & Python!! Basics ")
        'c-python-basics'
    """
    parts = (_NON_ALNUM.sub("", word).lower() for word in name.split())
    return "-".join(part for part in parts if part)[:MAX_SLUG_LENGTH]


def derive_module_id(slug: str, created_at: datetime | str) -> str:
    """
    Stable module identifier from its slug and creation time.

    The timestamp is rendered in UTC without separators or sub-second
    precision, e.g. ``("intro", "2024-01-01T00:00:00.123Z")`` gives
    ``"intro-20240101T000000Z"``.
    """
    stamp = parse_timestamp(created_at).strftime("%Y%m%dT%H%M%SZ")
    return f"{slug}-{stamp}"


def normalize_path(path: str | Path) -> str:
    """
    Canonical string form of a library path.

    Every registry operation goes through this one function so that a path
    registered with back slashes can be unregistered with forward slashes.
    """
    text = str(path).replace("\\", "/")
    if not text:
        return text
    text = posixpath.normpath(text)
    if text.startswith("//"):
        # normpath keeps a leading double slash; treat it as root
        text = "/" + text.lstrip("/")
    if _WINDOWS_DRIVE.match(text):
        text = text.lower()
    return text


# =============================================================================
# Library paths
# =============================================================================


def library_metadata_dir(library_path: str | Path) -> Path:
    return Path(library_path) / LIBRARY_DIR


def library_metadata_path(library_path: str | Path) -> Path:
    return library_metadata_dir(library_path) / METADATA_FILE


# =============================================================================
# Module paths
# =============================================================================


def module_dir(library_path: str | Path, module_slug: str) -> Path:
    """Directory of a module inside its library (named by slug)."""
    return Path(library_path) / module_slug


def module_data_dir(module_path: str | Path) -> Path:
    return Path(module_path) / MODULE_DIR


def module_metadata_path(module_path: str | Path) -> Path:
    return module_data_dir(module_path) / METADATA_FILE


def module_stats_path(module_path: str | Path) -> Path:
    return module_data_dir(module_path) / STATS_FILE


def quizzes_dir(module_path: str | Path) -> Path:
    return module_data_dir(module_path) / QUIZZES_DIR


def quiz_path(module_path: str | Path, quiz_id: str) -> Path:
    return quizzes_dir(module_path) / f"{quiz_id}.json"


def submissions_dir(module_path: str | Path) -> Path:
    return module_data_dir(module_path) / SUBMISSIONS_DIR


def submission_path(module_path: str | Path, quiz_id: str, attempt_number: int) -> Path:
    """Submission file; ``(quiz_id, attempt_number)`` is its identity key."""
    return submissions_dir(module_path) / f"{quiz_id}-{attempt_number}.json"


def attempt_pattern(quiz_id: str) -> str:
    """Glob matching every attempt file of one quiz."""
    return f"{glob.escape(quiz_id)}-*.json"
