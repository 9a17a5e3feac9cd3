"""
Calendar-day helpers.

All arithmetic is done on datetime.date values (local midnight, no time
component), so day differences are exact across DST changes and month or
year boundaries.

The two plan tracks index their weekly templates differently and the
difference is kept in two separately named functions:

- workout_index_for: Monday=0 .. Sunday=6
- diet_index_for:    Sunday=0 .. Saturday=6
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import date, datetime, timedelta

logger = logging.getLogger(__name__)


def parse_date(value: str) -> date:
    """
    Parse an ISO date or datetime string to a calendar date.

    Accepts "YYYY-MM-DD" as well as full ISO timestamps
    ("2024-01-05T18:30:00", "2024-01-05T18:30:00+02:00"); the time part is
    dropped.

    Raises:
        ValueError: If value is not an ISO date or datetime
    """
    value = value.strip()
    if len(value) == 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def normalize_dates(values: Iterable[str]) -> list[date]:
    """
    Return the unique, ascending calendar dates in values.

    Unparseable entries are skipped and logged rather than failing the
    whole set.
    """
    result: set[date] = set()
    for value in values:
        try:
            result.add(parse_date(value))
        except (TypeError, ValueError):
            logger.warning(f"Skipping unparseable date {value!r}")
    return sorted(result)


def days_between(start: date, end: date) -> int:
    """Signed number of calendar days from start to end."""
    return (end - start).days


def monday_of(d: date) -> date:
    """Monday of the Monday-Sunday week containing d."""
    return d - timedelta(days=d.weekday())


def next_sunday(d: date) -> date:
    """The first Sunday on or after d."""
    return d + timedelta(days=6 - d.weekday())


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def workout_index_for(d: date) -> int:
    """Workout template index for a date: Monday=0 .. Sunday=6."""
    return d.weekday()


def diet_index_for(d: date) -> int:
    """Diet template index for a date: Sunday=0 .. Saturday=6."""
    return (d.weekday() + 1) % 7


def template_index_for(track: str, d: date) -> int:
    """Dispatch to the track's own weekday convention."""
    if track == "workout":
        return workout_index_for(d)
    if track == "diet":
        return diet_index_for(d)
    raise ValueError(f"Unknown track: {track!r}")
