"""
Unit tests for the Leitner scheduler.

Pure functions only: every test passes an explicit ``now``.
"""

from datetime import datetime, timedelta, timezone

import pytest

from noggin.core.models import ModuleStats
from noggin.scheduling.leitner import (
    LEITNER_INTERVALS,
    advance,
    interval_days,
    is_due,
    next_review_date,
    priority,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def stats(box=1, next_review=NOW, last_review=None):
    return ModuleStats(
        module_id="m",
        current_box=box,
        next_review_date=next_review,
        last_review_date=last_review,
    )


class TestIntervals:
    """Tests for box intervals."""

    def test_interval_table(self):
        assert LEITNER_INTERVALS == {1: 1, 2: 2, 3: 7, 4: 14, 5: 30}

    @pytest.mark.parametrize("box,days", [(1, 1), (2, 2), (3, 7), (4, 14), (5, 30)])
    def test_next_review_is_whole_days(self, box, days):
        assert interval_days(box) == days
        assert next_review_date(box, NOW) == NOW + timedelta(days=days)


class TestAdvance:
    """Tests for box transitions."""

    def test_pass_from_box_1(self):
        updated = advance(stats(box=1), passed=True, now=NOW)

        assert updated.current_box == 2
        assert updated.next_review_date == NOW + timedelta(days=2)
        assert updated.last_review_date == NOW

    def test_box_5_is_a_ceiling(self):
        updated = advance(stats(box=5), passed=True, now=NOW)

        assert updated.current_box == 5
        assert updated.next_review_date == NOW + timedelta(days=30)

    @pytest.mark.parametrize("box", [1, 2, 3, 4, 5])
    def test_fail_resets_to_box_1(self, box):
        updated = advance(stats(box=box), passed=False, now=NOW)

        assert updated.current_box == 1
        assert updated.next_review_date == NOW + timedelta(days=1)

    @pytest.mark.parametrize("box", [1, 2, 3, 4, 5])
    def test_pass_never_lowers_box(self, box):
        assert advance(stats(box=box), passed=True, now=NOW).current_box >= box

    def test_input_not_modified(self):
        original = stats(box=3)
        snapshot = original.model_copy()

        advance(original, passed=True, now=NOW)

        assert original == snapshot

    def test_same_inputs_same_output(self):
        s = stats(box=2)
        assert advance(s, True, NOW) == advance(s, True, NOW)


class TestPriority:
    """Tests for review priority."""

    def test_no_stats(self):
        assert priority(None, NOW) == 0

    def test_overdue_days_weighted(self):
        s = stats(box=1, next_review=NOW - timedelta(days=2))
        assert priority(s, NOW) == pytest.approx(2 * 10 + 5 * 0.1)

    def test_not_yet_due_unweighted(self):
        s = stats(box=5, next_review=NOW + timedelta(days=3))
        assert priority(s, NOW) == pytest.approx(-3 + 0.1)

    def test_more_overdue_ranks_higher(self):
        a = stats(box=5, next_review=NOW - timedelta(days=3))
        b = stats(box=1, next_review=NOW - timedelta(days=2))
        assert priority(a, NOW) > priority(b, NOW)

    def test_lower_box_breaks_ties(self):
        overdue = NOW - timedelta(days=1)
        assert priority(stats(box=2, next_review=overdue), NOW) > priority(
            stats(box=4, next_review=overdue), NOW
        )


class TestIsDue:
    def test_due_at_exact_time(self):
        assert is_due(stats(next_review=NOW), NOW)

    def test_future_not_due(self):
        assert not is_due(stats(next_review=NOW + timedelta(seconds=1)), NOW)
