"""
Unit tests for slug, id and path helpers.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from noggin.core.paths import (
    MAX_SLUG_LENGTH,
    attempt_pattern,
    derive_module_id,
    module_metadata_path,
    module_stats_path,
    normalize_path,
    quiz_path,
    slugify,
    submission_path,
)


class TestSlugify:
    """Tests for slugify."""

    def test_lowercases_and_hyphenates(self):
        assert slugify("Hello World") == "hello-world"

    def test_strips_punctuation_and_extra_whitespace(self):
        assert slugify("  C++ & Python!! Basics ") == "c-python-basics"

    def test_non_ascii_letters_dropped(self):
        assert slugify("Café Über") == "caf-ber"

    def test_empty_title(self):
        assert slugify("") == ""
        assert slugify("?!") == ""

    def test_truncated(self):
        assert len(slugify("a" * 300)) == MAX_SLUG_LENGTH


class TestDeriveModuleId:
    """Tests for module id derivation."""

    def test_from_iso_string_drops_subseconds(self):
        assert derive_module_id("intro", "2024-01-01T00:00:00.123Z") == "intro-20240101T000000Z"

    def test_from_datetime(self):
        created = datetime(2024, 6, 30, 23, 59, 1, tzinfo=timezone.utc)
        assert derive_module_id("rust", created) == "rust-20240630T235901Z"

    def test_offset_rendered_in_utc(self):
        created = datetime(2024, 1, 1, 2, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert derive_module_id("x", created) == "x-20240101T000000Z"

    def test_string_and_datetime_agree(self):
        created = datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)
        assert derive_module_id("m", created) == derive_module_id("m", created.isoformat())


class TestNormalizePath:
    """Tests for registry path normalization."""

    def test_backslashes_become_forward_slashes(self):
        assert normalize_path("C:\\Users\\Me\\Rust") == normalize_path("c:/users/me/rust")

    def test_windows_drive_lowercased(self):
        assert normalize_path("D:/Study/Rust") == "d:/study/rust"

    def test_posix_case_preserved(self):
        assert normalize_path("/home/Me/Rust") == "/home/Me/Rust"

    def test_trailing_slash_and_dots_removed(self):
        assert normalize_path("/a/./b/../c/") == "/a/c"

    def test_leading_double_slash_collapsed(self):
        assert normalize_path("//srv/libs") == "/srv/libs"

    def test_accepts_path_objects(self):
        assert normalize_path(Path("/tmp/lib")) == "/tmp/lib"

    def test_empty(self):
        assert normalize_path("") == ""


class TestLayout:
    """Tests for on-disk layout helpers."""

    def test_module_files(self, tmp_path):
        assert module_metadata_path(tmp_path) == tmp_path / ".mod" / "meta.json"
        assert module_stats_path(tmp_path) == tmp_path / ".mod" / "stats.json"

    def test_quiz_and_submission_files(self, tmp_path):
        assert quiz_path(tmp_path, "quiz-1") == tmp_path / ".mod" / "quizzes" / "quiz-1.json"
        assert (
            submission_path(tmp_path, "quiz-1", 2)
            == tmp_path / ".mod" / "submissions" / "quiz-1-2.json"
        )

    def test_attempt_pattern_escapes_glob_characters(self):
        assert attempt_pattern("quiz-1") == "quiz-1-*.json"
        assert attempt_pattern("quiz[1]?") == "quiz[[]1][?]-*.json"
