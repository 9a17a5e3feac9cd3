"""
Streak calculation over sets of completed dates.

Input dates are ISO strings; duplicates and unparseable entries are
tolerated (see dates.normalize_dates). A current streak survives while the
most recent completed date is today or yesterday, so an unfinished today
does not break it.
"""

from collections.abc import Iterable
from datetime import date, timedelta

from .dates import days_between, normalize_dates
from .models import HistoryEntry, StreakSnapshot


def current_streak(dates: Iterable[str], today: date) -> int:
    """
    Length of the consecutive run ending at the most recent completed date.

    Returns 0 if that date is more than one day before today.
    """
    unique = normalize_dates(dates)
    if not unique:
        return 0

    most_recent = unique[-1]
    if days_between(most_recent, today) > 1:
        return 0

    present = set(unique)
    streak = 0
    cursor = most_recent
    while cursor in present:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(dates: Iterable[str]) -> int:
    """Longest run of consecutive calendar dates. Empty input gives 0."""
    unique = normalize_dates(dates)
    if not unique:
        return 0

    longest = 1
    running = 1
    for prev, curr in zip(unique, unique[1:]):
        if days_between(prev, curr) == 1:
            running += 1
        else:
            running = 1
        longest = max(longest, running)
    return longest


def streak_snapshot(dates: Iterable[str], today: date) -> StreakSnapshot:
    dates = list(dates)
    return StreakSnapshot(
        current=current_streak(dates, today),
        longest=longest_streak(dates),
    )


def overall_dates(history: list[HistoryEntry]) -> list[str]:
    """Dates on which both tracks were done."""
    return [entry.date for entry in history if entry.overall_done]


def current_overall_streak(history: list[HistoryEntry], today: date) -> int:
    return current_streak(overall_dates(history), today)


def longest_overall_streak(history: list[HistoryEntry]) -> int:
    return longest_streak(overall_dates(history))
