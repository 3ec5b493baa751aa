"""Spaced repetition scheduling (Leitner boxes)."""

from noggin.scheduling.leitner import (
    LEITNER_INTERVALS,
    advance,
    interval_days,
    is_due,
    next_review_date,
    priority,
)

__all__ = [
    "LEITNER_INTERVALS",
    "advance",
    "interval_days",
    "is_due",
    "next_review_date",
    "priority",
]
