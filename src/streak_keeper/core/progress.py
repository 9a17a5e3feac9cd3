"""
Consistency, achievement and milestone evaluation.

Takes plans and completion logs (already read from storage) and assembles
the display-ready ProgressSummary. Every function here is pure: the only
state carried between queries is the achievement unlock ledger, which is
passed in and returned rather than held.
"""

from dataclasses import dataclass
from datetime import date, datetime

from .calendar import plan_days
from .completion import completed_item_count, completion_key
from .config import MONTHLY_WINDOW_DAYS
from .dates import monday_of
from .history import build_history, history_anchor
from .models import (
    Achievement,
    HistoryEntry,
    Milestone,
    PeriodStats,
    Plan,
    ProgressSummary,
    StreakSnapshot,
    WeeklyConsistency,
)
from .rewards import ACHIEVEMENT_RULES, MILESTONE_RULES, AchievementRule, MilestoneRule
from .status import completed_dates_for_plan
from .streaks import current_overall_streak, longest_overall_streak, streak_snapshot


@dataclass
class TrackLog:
    """A track's plan together with its completion-log keys."""

    plan: Plan | None
    completed_items: set[str]


def weekly_consistency(history: list[HistoryEntry], today: date) -> WeeklyConsistency:
    """
    Done-day counts for the calendar week, Monday through today.

    Not a trailing 7-day window: on a Monday only Monday counts.
    """
    week_start = monday_of(today).isoformat()
    today_iso = today.isoformat()
    this_week = [e for e in history if week_start <= e.date <= today_iso]

    return WeeklyConsistency(
        workout=sum(1 for e in this_week if e.workout_done),
        diet=sum(1 for e in this_week if e.diet_done),
        overall=sum(1 for e in this_week if e.overall_done),
        elapsed_days=today.weekday() + 1,
    )


def monthly_consistency(history: list[HistoryEntry]) -> int:
    """Percentage of overall-done entries among the trailing 30 history entries."""
    window = history[-MONTHLY_WINDOW_DAYS:]
    if not window:
        return 0
    done = sum(1 for e in window if e.overall_done)
    return round(done / len(window) * 100)


def _streak_for(category: str, workout: int, diet: int, overall: int) -> int:
    return {"workout": workout, "diet": diet, "overall": overall}[category]


def unlocked_rules(
    longest_workout: int,
    longest_diet: int,
    longest_overall: int,
    rules: list[AchievementRule] | None = None,
) -> list[AchievementRule]:
    """Achievement rules whose threshold is met by the longest streaks."""
    rules = ACHIEVEMENT_RULES if rules is None else rules
    return [
        rule
        for rule in rules
        if rule.is_unlocked(_streak_for(rule.category, longest_workout, longest_diet, longest_overall))
    ]


def resolve_unlocks(
    unlocked: list[AchievementRule],
    ledger: dict[str, str],
    now: datetime,
) -> tuple[list[Achievement], dict[str, str]]:
    """
    Attach first-unlock timestamps to unlocked achievements.

    An achievement seen for the first time is stamped with now and added
    to the returned ledger; one already in the ledger keeps its original
    timestamp. Ledger entries for achievements that are no longer unlocked
    are kept so a later re-unlock shows the first time.

    Returns:
        (achievements, updated ledger)
    """
    updated = dict(ledger)
    achievements: list[Achievement] = []
    for rule in unlocked:
        if rule.id not in updated:
            updated[rule.id] = now.isoformat(timespec="seconds")
        achievements.append(
            Achievement(
                id=rule.id,
                title=rule.title,
                description=rule.description,
                icon=rule.icon,
                category=rule.category,  # type: ignore[arg-type]
                unlocked_at=updated[rule.id],
            )
        )
    return achievements, updated


def evaluate_milestones(
    current_workout: int,
    current_diet: int,
    current_overall: int,
    rules: list[MilestoneRule] | None = None,
) -> list[Milestone]:
    """Every milestone target, flagged achieved against the current streaks."""
    rules = MILESTONE_RULES if rules is None else rules
    return [
        Milestone(
            target=rule.target,
            title=rule.title,
            category=rule.category,  # type: ignore[arg-type]
            achieved=_streak_for(rule.category, current_workout, current_diet, current_overall)
            >= rule.target,
        )
        for rule in rules
    ]


def build_summary(
    workout: TrackLog,
    diet: TrackLog,
    today: date,
    now: datetime,
    unlock_ledger: dict[str, str] | None = None,
) -> tuple[ProgressSummary, dict[str, str]]:
    """
    Assemble the full progress summary.

    Args:
        workout: Workout plan and its completion log
        diet: Diet plan and its completion log
        today: Current local date
        now: Current local time, used to stamp new unlocks
        unlock_ledger: Persisted {achievement_id: first-unlock ISO time}

    Returns:
        (summary, updated unlock ledger)
    """
    workout_dates = completed_dates_for_plan(workout.plan, workout.completed_items, today)
    diet_dates = completed_dates_for_plan(diet.plan, diet.completed_items, today)

    history = build_history(
        workout_dates,
        diet_dates,
        history_anchor(workout.plan, diet.plan, today),
        today,
    )

    workout_streak = streak_snapshot(workout_dates, today)
    diet_streak = streak_snapshot(diet_dates, today)
    overall_streak = StreakSnapshot(
        current=current_overall_streak(history, today),
        longest=longest_overall_streak(history),
    )

    achievements, ledger = resolve_unlocks(
        unlocked_rules(workout_streak.longest, diet_streak.longest, overall_streak.longest),
        unlock_ledger or {},
        now,
    )

    summary = ProgressSummary(
        workout=workout_streak,
        diet=diet_streak,
        overall=overall_streak,
        weekly=weekly_consistency(history, today),
        monthly_consistency=monthly_consistency(history),
        total_active_days=sum(1 for e in history if e.overall_done),
        history=history,
        achievements=achievements,
        milestones=evaluate_milestones(
            workout_streak.current, diet_streak.current, overall_streak.current
        ),
    )
    return summary, ledger


def period_stats(
    plan: Plan,
    completed_items: set[str],
    start: date,
    end: date,
) -> PeriodStats:
    """
    Completion and calorie totals over plan days in [start, end].

    Calories sum the items checked off (burned for exercises, consumed for
    meals). Rest days contribute nothing.
    """
    stats = PeriodStats(start_date=start.isoformat(), end_date=end.isoformat())
    for day in plan_days(plan, until=end):
        if day.date < stats.start_date or day.is_rest_day:
            continue
        stats.items_total += len(day.items)
        stats.items_completed += completed_item_count(day, completed_items)
        stats.calories += sum(
            item.calories
            for item in day.items
            if completion_key(day.date, item.item_id) in completed_items
        )
    return stats
