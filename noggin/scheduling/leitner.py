"""
Leitner-box spaced repetition scheduler.

Implements:
- Fixed review intervals per box
- Pass/fail box transitions
- Review priority for the practice feed

Box intervals:
1 - every day
2 - every 2 days
3 - weekly
4 - every 2 weeks
5 - monthly

A pass moves a module up one box (5 is a ceiling, not an exit: a module
that keeps passing keeps its 30-day cadence). A fail resets it to box 1.
Nothing else moves a module between boxes.

All functions are pure. ``now`` defaults to the current UTC time.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from noggin.core.dates import days_between, ensure_utc, utc_now
from noggin.core.models import ModuleStats

# =============================================================================
# Leitner Boxes
# =============================================================================

LEITNER_INTERVALS: dict[int, int] = {
    1: 1,
    2: 2,
    3: 7,
    4: 14,
    5: 30,
}

MIN_BOX = 1
MAX_BOX = 5

OVERDUE_WEIGHT = 10.0
BOX_WEIGHT = 0.1


def interval_days(box: int) -> int:
    """Review interval for a box. Callers validate ``box`` in 1..5."""
    return LEITNER_INTERVALS[box]


def next_review_date(box: int, start: datetime) -> datetime:
    """``start`` plus the box interval, in whole calendar days."""
    return ensure_utc(start) + timedelta(days=interval_days(box))


def is_due(stats: ModuleStats, now: datetime | None = None) -> bool:
    """True when the module's next review is at or before ``now``."""
    now = now or utc_now()
    return stats.next_review_date <= ensure_utc(now)


def priority(stats: ModuleStats | None, now: datetime | None = None) -> float:
    """
    Review priority; higher means review sooner.

    Overdue days dominate (weighted x10); the box only breaks ties in favour
    of less-mastered (lower) boxes. Modules not yet due get their negative
    day count unweighted.

        priority = (overdue > 0 ? overdue * 10 : overdue) + (6 - box) * 0.1

    Returns:
        0 when there are no stats
    """
    if stats is None:
        return 0.0
    now = now or utc_now()
    overdue = days_between(now, stats.next_review_date)
    weighted = overdue * OVERDUE_WEIGHT if overdue > 0 else overdue
    return weighted + (MAX_BOX + 1 - stats.current_box) * BOX_WEIGHT


def advance(stats: ModuleStats, passed: bool, now: datetime | None = None) -> ModuleStats:
    """
    Apply one graded review to the stats.

    Args:
        stats: Current stats (not modified)
        passed: Whether the submission passed
        now: Review time

    Returns:
        New stats with the new box, next review date and last review date
    """
    now = ensure_utc(now or utc_now())
    new_box = min(stats.current_box + 1, MAX_BOX) if passed else MIN_BOX
    return stats.model_copy(
        update={
            "current_box": new_box,
            "next_review_date": next_review_date(new_box, now),
            "last_review_date": now,
        }
    )
