"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans and progress.
"""

from rich.console import Console
from rich.table import Table

from ..core.completion import completion_key
from ..core.models import (
    Achievement,
    DatedDay,
    DayProgress,
    HistoryEntry,
    Milestone,
    PeriodStats,
    ProgressSummary,
)
from ..core.rewards import ACHIEVEMENT_RULES

console = Console()

_STATUS_STYLES: dict[str, str] = {
    "rest": "dim",
    "upcoming": "white",
    "in_progress": "yellow",
    "completed": "green",
    "missed": "red",
}

_STATUS_LABELS: dict[str, str] = {
    "rest": "rest",
    "upcoming": "upcoming",
    "in_progress": "in progress",
    "completed": "done",
    "missed": "missed",
}


def _check(done: bool) -> str:
    return "[green]✓[/green]" if done else "[dim]·[/dim]"


def format_week_table(
    track: str,
    week: list[tuple[DatedDay, DayProgress]],
    completed_items: set[str],
) -> Table:
    """
    Create a Rich table for one projected plan week.

    Args:
        track: "workout" or "diet"
        week: Dated days with their classified progress
        completed_items: Completion-log keys, used to tick individual items

    Returns:
        Rich Table object
    """
    week_number = week[0][0].week_number if week else 1
    table = Table(title=f"{track.capitalize()} plan: week {week_number}")

    table.add_column("Day", justify="right", style="dim", width=4)
    table.add_column("Date", style="cyan")
    table.add_column("Weekday")
    table.add_column("Focus", style="magenta")
    table.add_column("Items")
    table.add_column("Status", justify="center")
    table.add_column("%", justify="right")

    for day, progress in week:
        if day.is_rest_day:
            items = "-"
        else:
            items = "\n".join(
                f"{_check(completion_key(day.date, item.item_id) in completed_items)} {item.item_id}"
                for item in day.items
            ) or "[dim](nothing parsed)[/dim]"

        style = _STATUS_STYLES[progress.status]
        table.add_row(
            str(day.day_number),
            day.date,
            day.weekday_name,
            day.label or "",
            items,
            f"[{style}]{_STATUS_LABELS[progress.status]}[/{style}]",
            f"{progress.percentage:.0f}",
        )

    return table


def format_streak_display(summary: ProgressSummary) -> str:
    """
    Format streaks and consistency as a text block.

    Args:
        summary: Progress summary to display

    Returns:
        Formatted string
    """
    weekly = summary.weekly
    lines = [
        "Streaks (current / longest)",
        f"- Workout: {summary.workout.current} / {summary.workout.longest} days",
        f"- Diet:    {summary.diet.current} / {summary.diet.longest} days",
        f"- Overall: {summary.overall.current} / {summary.overall.longest} days",
        "",
        "Consistency",
        f"- This week: workout {weekly.workout}, diet {weekly.diet}, "
        f"both {weekly.overall} of {weekly.elapsed_days} days ({weekly.percentage}%)",
        f"- Last 30 days: {summary.monthly_consistency}%",
        f"- Total active days: {summary.total_active_days}",
    ]
    return "\n".join(lines)


def format_history_table(history: list[HistoryEntry]) -> Table:
    table = Table(title="History")
    table.add_column("Date", style="cyan")
    table.add_column("Workout", justify="center")
    table.add_column("Diet", justify="center")
    table.add_column("Both", justify="center", style="bold")

    for entry in history:
        table.add_row(
            entry.date,
            _check(entry.workout_done),
            _check(entry.diet_done),
            _check(entry.overall_done),
        )
    return table


def format_achievements_table(achievements: list[Achievement]) -> Table:
    """
    Create a Rich table of every achievement, unlocked ones first.

    Args:
        achievements: Unlocked achievements from the summary

    Returns:
        Rich Table object
    """
    unlocked = {a.id: a for a in achievements}
    table = Table(title="Achievements")
    table.add_column("", width=2)
    table.add_column("Title", style="bold")
    table.add_column("Description")
    table.add_column("Category", style="magenta")
    table.add_column("Unlocked", style="green")

    rules = sorted(ACHIEVEMENT_RULES, key=lambda r: r.id not in unlocked)
    for rule in rules:
        achievement = unlocked.get(rule.id)
        table.add_row(
            rule.icon if achievement else "🔒",
            rule.title,
            rule.description,
            rule.category,
            achievement.unlocked_at.replace("T", " ") if achievement else "[dim]locked[/dim]",
        )
    return table


def format_milestones_table(milestones: list[Milestone]) -> Table:
    table = Table(title="Milestones (current streak)")
    table.add_column("Category", style="magenta")
    table.add_column("Target", justify="right")
    table.add_column("Milestone")
    table.add_column("", justify="center")
    for m in milestones:
        table.add_row(m.category, str(m.target), m.title, _check(m.achieved))
    return table


def format_period_stats(track: str, period: str, stats: PeriodStats) -> str:
    calorie_label = "burned" if track == "workout" else "consumed"
    noun = "exercises" if track == "workout" else "meals"
    return "\n".join(
        [
            f"{track.capitalize()} {period}: {stats.start_date} to {stats.end_date}",
            f"- {noun.capitalize()}: {stats.items_completed} / {stats.items_total} "
            f"({stats.completion_rate}%)",
            f"- Calories {calorie_label}: {stats.calories} kcal",
        ]
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
