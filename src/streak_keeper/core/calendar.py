"""
Calendar projection of a 7-day template onto real dates.

Plan weeks are irregular at the start: week 1 runs from the start date
through the first Sunday (1 to 7 days), and every later week runs Monday
through Sunday. Week numbers are clamped to [1, total_weeks].
"""

from datetime import date, timedelta

from .config import DAYS_PER_WEEK
from .dates import date_range, days_between, monday_of, next_sunday, template_index_for
from .models import DatedDay, Plan


def first_week_length(start: date) -> int:
    """Days in week 1: start date through the next Sunday inclusive."""
    return DAYS_PER_WEEK - start.weekday()


def current_week_number(plan: Plan, today: date) -> int:
    """
    Plan week containing today.

    Returns 1 before the plan starts and total_weeks once the plan has run
    past its last week.
    """
    days_diff = days_between(plan.start, today)
    if days_diff < 0:
        return 1

    first_len = first_week_length(plan.start)
    if days_diff < first_len:
        week = 1
    else:
        week = 2 + (days_diff - first_len) // DAYS_PER_WEEK

    return max(1, min(week, plan.total_weeks))


def week_date_range(plan: Plan, week_number: int) -> tuple[date, date]:
    """
    Inclusive (first, last) dates of a plan week.

    Args:
        plan: The plan
        week_number: 1-based plan week

    Raises:
        ValueError: If week_number < 1
    """
    if week_number < 1:
        raise ValueError("week_number must be >= 1")

    start = plan.start
    if week_number == 1:
        return start, next_sunday(start)

    first_monday = start + timedelta(days=first_week_length(start))
    week_start = first_monday + timedelta(days=(week_number - 2) * DAYS_PER_WEEK)
    return week_start, week_start + timedelta(days=DAYS_PER_WEEK - 1)


def month_date_range(plan: Plan, month_number: int) -> tuple[date, date]:
    """Inclusive (first, last) dates of the Nth calendar month of the plan."""
    if month_number < 1:
        raise ValueError("month_number must be >= 1")

    month_index = plan.start.month - 1 + month_number - 1
    year = plan.start.year + month_index // 12
    month = month_index % 12 + 1
    first = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return first, next_first - timedelta(days=1)


def current_month_number(plan: Plan, today: date) -> int:
    """Calendar-month number of today relative to the plan start (1-based)."""
    months = (today.year - plan.start.year) * 12 + (today.month - plan.start.month)
    return max(1, months + 1)


def dated_day(plan: Plan, d: date) -> DatedDay:
    """Project the template slot for a calendar date."""
    index = template_index_for(plan.track, d)
    template = plan.weekly_template[index]
    return DatedDay(
        date=d.isoformat(),
        template_index=index,
        day_number=days_between(plan.start, d) + 1,
        week_number=current_week_number(plan, d),
        is_rest_day=template.is_rest_day,
        items=list(template.items),
        label=template.label,
    )


def project_week(plan: Plan, today: date) -> list[DatedDay]:
    """
    Dated days of the plan week that is relevant today.

    Week 1 yields the start date through the first Sunday and never spills
    into week 2. Later weeks yield Monday through Sunday of the calendar week
    containing today.
    """
    if current_week_number(plan, today) == 1:
        first, last = week_date_range(plan, 1)
    else:
        first = monday_of(today)
        last = first + timedelta(days=DAYS_PER_WEEK - 1)
    return [dated_day(plan, d) for d in date_range(first, last)]


def plan_days(plan: Plan, until: date | None = None) -> list[DatedDay]:
    """
    Every dated day of the plan's active span, optionally stopping at until.

    Args:
        plan: The plan
        until: Last date to include (inclusive); None for the whole span
    """
    last = plan.end - timedelta(days=1)
    if until is not None and until < last:
        last = until
    return [dated_day(plan, d) for d in date_range(plan.start, last)]


def plan_progress_percentage(plan: Plan, today: date) -> int:
    """Share of plan weeks fully behind today, as a rounded percentage."""
    week = current_week_number(plan, today)
    return round((week - 1) / plan.total_weeks * 100)
