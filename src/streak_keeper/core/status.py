"""
Day status classification and the completed-dates projection.

A day's status is derived on every query from the plan, the completion log
and the current date. Precedence, first match wins:

1. rest day                       -> rest, 100%
2. date already marked completed  -> completed, live percentage
3. date is today                  -> in_progress (today is never missed)
4. date before the plan start     -> upcoming, 0%
5. past plan day                  -> completed if >= threshold, else missed
6. future day                     -> upcoming, 0%
"""

from datetime import date

from .calendar import plan_days
from .completion import completed_item_count
from .config import COMPLETION_THRESHOLD_PCT
from .models import DatedDay, DayProgress, Plan


def completion_percentage(day: DatedDay, completed_items: set[str]) -> float:
    """Share of the day's items present in the completion log (0 if no items)."""
    if not day.items:
        return 0.0
    return completed_item_count(day, completed_items) / len(day.items) * 100


def meets_threshold(percentage: float) -> bool:
    return percentage >= COMPLETION_THRESHOLD_PCT


def classify_day(
    day: DatedDay,
    completed_dates: set[str],
    completed_items: set[str],
    today: date,
    plan_start: date,
) -> DayProgress:
    """
    Classify a dated day.

    Args:
        day: Projected day
        completed_dates: ISO dates already known to have cleared the threshold
        completed_items: The track's completion-log keys
        today: Current local date
        plan_start: First day of the plan

    Returns:
        DayProgress with exactly one of the five statuses
    """
    if day.is_rest_day:
        return DayProgress("rest", 100.0)

    if day.date in completed_dates:
        return DayProgress("completed", completion_percentage(day, completed_items))

    day_date = date.fromisoformat(day.date)

    if day_date == today:
        return DayProgress("in_progress", completion_percentage(day, completed_items))

    if day_date < plan_start:
        return DayProgress("upcoming", 0.0)

    if day_date < today:
        pct = completion_percentage(day, completed_items)
        return DayProgress("completed" if meets_threshold(pct) else "missed", pct)

    return DayProgress("upcoming", 0.0)


def completed_dates_for_plan(
    plan: Plan | None,
    completed_items: set[str],
    today: date,
) -> list[str]:
    """
    ISO dates in the plan span up to today on which the threshold was met.

    Rest days and days without items never count. No plan means no dates.
    """
    if plan is None:
        return []
    return [
        day.date
        for day in plan_days(plan, until=today)
        if not day.is_rest_day
        and day.items
        and meets_threshold(completion_percentage(day, completed_items))
    ]
