"""
Per-day history timeline combining both tracks.

The timeline runs from an anchor date through today, one entry per
calendar day, ascending, with no gaps or duplicates.
"""

from datetime import date, timedelta

from .config import HISTORY_FALLBACK_DAYS
from .dates import date_range, normalize_dates
from .models import HistoryEntry, Plan


def history_anchor(
    workout_plan: Plan | None,
    diet_plan: Plan | None,
    today: date,
) -> date:
    """
    First date of the history timeline.

    The earlier plan start when both plans exist, the only plan's start when
    one does, else the trailing HISTORY_FALLBACK_DAYS window ending today.
    """
    starts = [plan.start for plan in (workout_plan, diet_plan) if plan is not None]
    if starts:
        return min(starts)
    return today - timedelta(days=HISTORY_FALLBACK_DAYS - 1)


def build_history(
    workout_dates: list[str],
    diet_dates: list[str],
    anchor_start: date | None,
    today: date,
) -> list[HistoryEntry]:
    """
    Build the combined timeline from anchor_start through today inclusive.

    Args:
        workout_dates: ISO dates the workout track was done
        diet_dates: ISO dates the diet track was done
        anchor_start: First date; None selects the fallback window
        today: Last date

    Returns:
        One HistoryEntry per calendar day. Empty if anchor_start is after today.
    """
    if anchor_start is None:
        anchor_start = today - timedelta(days=HISTORY_FALLBACK_DAYS - 1)

    workout = set(normalize_dates(workout_dates))
    diet = set(normalize_dates(diet_dates))

    return [
        HistoryEntry(
            date=d.isoformat(),
            workout_done=d in workout,
            diet_done=d in diet,
        )
        for d in date_range(anchor_start, today)
    ]
