"""
Completion-log keys.

A completion event is the string "{YYYY-MM-DD}-{item_id}", where item_id is
an exercise name or "{slot}-{meal name}". The log is a set of such keys.
"""

from .models import DatedDay


def completion_key(day_date: str, item_id: str) -> str:
    """Build the completion key for an item on a date."""
    return f"{day_date}-{item_id}"


def day_item_keys(day: DatedDay) -> list[str]:
    """Completion keys for every item of a dated day, in template order."""
    return [completion_key(day.date, item.item_id) for item in day.items]


def completed_item_count(day: DatedDay, completed_items: set[str]) -> int:
    return sum(1 for key in day_item_keys(day) if key in completed_items)
