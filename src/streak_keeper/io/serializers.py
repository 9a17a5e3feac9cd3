"""
JSON serialization for plan and progress models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import re
from datetime import datetime
from typing import Any

from ..core.config import DAYS_PER_WEEK, MEAL_SLOTS, TRACKS
from ..core.models import (
    DayTemplate,
    HistoryEntry,
    Plan,
    PlanItem,
    ProgressSummary,
    StreakSnapshot,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_track(track: str) -> str:
    """
    Validate a track name.

    Raises:
        ValidationError: If track is not "workout" or "diet"
    """
    if track not in TRACKS:
        raise ValidationError(f"Invalid track: {track}. Must be one of {TRACKS}")
    return track


def plan_item_to_dict(item: PlanItem) -> dict[str, Any]:
    """Convert PlanItem to a compact dict; unset optional fields are omitted."""
    d: dict[str, Any] = {"name": item.name}
    if item.slot is not None:
        d["slot"] = item.slot
    if item.calories:
        d["calories"] = item.calories
    if item.sets is not None:
        d["sets"] = item.sets
    if item.reps is not None:
        d["reps"] = item.reps
    if item.rest is not None:
        d["rest"] = item.rest
    if item.target_muscles:
        d["target_muscles"] = list(item.target_muscles)
    return d


def dict_to_plan_item(data: dict[str, Any]) -> PlanItem:
    """
    Convert dict to PlanItem.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict) or not data.get("name"):
        raise ValidationError(f"Plan item needs a name: {data!r}")

    slot = data.get("slot")
    if slot is not None and slot not in MEAL_SLOTS:
        raise ValidationError(f"Invalid meal slot: {slot}. Must be one of {MEAL_SLOTS}")

    try:
        return PlanItem(
            name=str(data["name"]),
            slot=slot,
            calories=int(data.get("calories", 0)),
            sets=int(data["sets"]) if data.get("sets") is not None else None,
            reps=str(data["reps"]) if data.get("reps") is not None else None,
            rest=str(data["rest"]) if data.get("rest") is not None else None,
            target_muscles=[str(m) for m in data.get("target_muscles", [])],
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plan item {data.get('name')!r}: {e}") from e


def day_template_to_dict(day: DayTemplate) -> dict[str, Any]:
    d: dict[str, Any] = {"is_rest_day": day.is_rest_day}
    if day.label:
        d["label"] = day.label
    if day.items:
        d["items"] = [plan_item_to_dict(item) for item in day.items]
    return d


def dict_to_day_template(data: dict[str, Any]) -> DayTemplate:
    """
    Convert dict to DayTemplate.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Day template must be an object, got {data!r}")
    try:
        return DayTemplate(
            is_rest_day=bool(data.get("is_rest_day", False)),
            items=[dict_to_plan_item(item) for item in data.get("items", [])],
            label=str(data.get("label", "")),
        )
    except ValueError as e:
        raise ValidationError(f"Invalid day template: {e}") from e


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    """
    Convert Plan to JSON-compatible dict.

    Args:
        plan: Plan to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "track": plan.track,
        "goal": plan.goal,
        "start_date": plan.start_date,
        "total_weeks": plan.total_weeks,
        "weekly_template": [day_template_to_dict(day) for day in plan.weekly_template],
    }
    if plan.user_id is not None:
        d["user_id"] = plan.user_id
    if plan.duration:
        d["duration"] = plan.duration
    if plan.target_calories is not None:
        d["target_calories"] = plan.target_calories
    if plan.water_intake is not None:
        d["water_intake"] = plan.water_intake
    return d


def dict_to_plan(data: dict[str, Any]) -> Plan:
    """
    Convert dict to Plan.

    Args:
        data: Dict representation

    Returns:
        Plan instance

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Plan must be an object, got {type(data).__name__}")

    for required in ("track", "start_date", "total_weeks", "weekly_template"):
        if required not in data:
            raise ValidationError(f"Plan is missing '{required}'")

    validate_track(data["track"])
    validate_date(data["start_date"])

    template = data["weekly_template"]
    if not isinstance(template, list) or len(template) != DAYS_PER_WEEK:
        raise ValidationError(f"weekly_template must be a list of {DAYS_PER_WEEK} days")

    try:
        total_weeks = int(data["total_weeks"])
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid total_weeks: {data['total_weeks']!r}") from e
    if total_weeks < 1:
        raise ValidationError(f"total_weeks must be positive, got {total_weeks}")

    target_calories = data.get("target_calories")
    try:
        return Plan(
            track=data["track"],
            goal=str(data.get("goal", "")),
            start_date=data["start_date"],
            total_weeks=total_weeks,
            weekly_template=[dict_to_day_template(day) for day in template],
            user_id=data.get("user_id"),
            duration=str(data.get("duration", "")),
            target_calories=int(target_calories) if target_calories is not None else None,
            water_intake=data.get("water_intake"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plan: {e}") from e


def _streak_to_dict(snapshot: StreakSnapshot) -> dict[str, int]:
    return {"current": snapshot.current, "longest": snapshot.longest}


def history_entry_to_dict(entry: HistoryEntry) -> dict[str, Any]:
    return {
        "date": entry.date,
        "workout_done": entry.workout_done,
        "diet_done": entry.diet_done,
        "overall_done": entry.overall_done,
    }


def summary_to_dict(summary: ProgressSummary) -> dict[str, Any]:
    """
    Convert ProgressSummary to a JSON-compatible dict for machine output.

    Args:
        summary: Summary to convert

    Returns:
        Dict representation
    """
    return {
        "workout": _streak_to_dict(summary.workout),
        "diet": _streak_to_dict(summary.diet),
        "overall": _streak_to_dict(summary.overall),
        "weekly": {
            "workout": summary.weekly.workout,
            "diet": summary.weekly.diet,
            "overall": summary.weekly.overall,
            "elapsed_days": summary.weekly.elapsed_days,
            "percentage": summary.weekly.percentage,
        },
        "monthly_consistency": summary.monthly_consistency,
        "total_active_days": summary.total_active_days,
        "achievements": [
            {
                "id": a.id,
                "title": a.title,
                "description": a.description,
                "icon": a.icon,
                "category": a.category,
                "unlocked_at": a.unlocked_at,
            }
            for a in summary.achievements
        ],
        "milestones": [
            {
                "target": m.target,
                "title": m.title,
                "category": m.category,
                "achieved": m.achieved,
            }
            for m in summary.milestones
        ],
        "history": [history_entry_to_dict(e) for e in summary.history],
    }
