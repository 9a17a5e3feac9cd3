"""Plan commands: import-plan, week, done, reset-plan, plan-length."""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import calculate_plan_weeks, format_duration
from ...io.plan_parser import parse_plan
from ...io.serializers import ValidationError, validate_date, validate_track
from ...io.storage import StorageError
from .. import views
from ..app import StoreOption, TrackOption, app, get_tracker


@app.command("import-plan")
def import_plan(
    plan_file: Annotated[
        Path,
        typer.Argument(help="Text file holding the generated plan", exists=True, dir_okay=False),
    ],
    track: TrackOption = "workout",
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="Plan start date (YYYY-MM-DD, default: today)"),
    ] = None,
    weeks: Annotated[
        Optional[int],
        typer.Option("--weeks", "-w", min=1, help="Plan length in weeks (default: read from the text)"),
    ] = None,
    store_path: StoreOption = None,
) -> None:
    """
    Parse a generated plan and make it the current plan for a track.
    """
    tracker = get_tracker(store_path)

    try:
        validate_track(track)
        start_date = (
            datetime.strptime(validate_date(start), "%Y-%m-%d").date()
            if start
            else tracker.today()
        )
        plan = parse_plan(plan_file.read_text(encoding="utf-8"), track, start_date, weeks)
        tracker.save_plan(plan)
    except (ValidationError, ValueError, StorageError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    training_days = sum(1 for day in plan.weekly_template if not day.is_rest_day)
    item_count = sum(len(day.items) for day in plan.weekly_template)
    views.print_success(
        f"Imported {track} plan '{plan.goal}': {plan.total_weeks} weeks from {plan.start_date}, "
        f"{training_days} active days, {item_count} items per week"
    )
    if item_count == 0:
        views.print_warning("No items were recognised in the plan text.")


@app.command()
def week(
    track: TrackOption = "workout",
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    store_path: StoreOption = None,
) -> None:
    """
    Show the current plan week with each day's status.
    """
    tracker = get_tracker(store_path)
    try:
        validate_track(track)
        completed_items = tracker.store.load_completions(track)
        days = tracker.week_view(track, completed_items)
    except (ValidationError, StorageError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not days:
        views.print_info(f"No {track} plan. Run 'import-plan --track {track} FILE' first.")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([
            {
                "date": day.date,
                "day_number": day.day_number,
                "week_number": day.week_number,
                "template_index": day.template_index,
                "is_rest_day": day.is_rest_day,
                "items": [item.item_id for item in day.items],
                "status": progress.status,
                "percentage": round(progress.percentage),
            }
            for day, progress in days
        ], indent=2))
        return

    position = tracker.plan_position(track)
    views.console.print()
    views.console.print(views.format_week_table(track, days, completed_items))
    if position is not None:
        current, total, pct = position
        views.console.print(f"Week {current} of {total} ({pct}% of plan behind you)")
    views.console.print()


@app.command()
def done(
    item: Annotated[
        str,
        typer.Argument(help="Exercise name, or 'slot-meal' for diet (e.g. breakfast-Oatmeal)"),
    ],
    track: TrackOption = "workout",
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Date the item was done (YYYY-MM-DD, default: today)"),
    ] = None,
    store_path: StoreOption = None,
) -> None:
    """
    Mark a planned exercise or meal as done.
    """
    tracker = get_tracker(store_path)
    day_date = date or tracker.today().isoformat()

    try:
        added = tracker.record_completion(track, day_date, item)
    except (ValidationError, StorageError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if added:
        views.print_success(f"Logged {item} on {day_date}")
    else:
        views.print_info(f"{item} was already logged on {day_date}")


@app.command("reset-plan")
def reset_plan(
    track: TrackOption = "workout",
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    store_path: StoreOption = None,
) -> None:
    """
    Delete a track's plan together with its completion log.
    """
    try:
        validate_track(track)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Delete the {track} plan and its log?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        get_tracker(store_path).reset_plan(track)
    except StorageError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Removed {track} plan")


@app.command("plan-length")
def plan_length(
    goal: Annotated[str, typer.Option("--goal", "-g", help="Goal, e.g. 'Lose fat'")],
    current_weight: Annotated[
        Optional[float],
        typer.Option("--current-weight", help="Current bodyweight in kg"),
    ] = None,
    target_weight: Annotated[
        Optional[float],
        typer.Option("--target-weight", help="Target bodyweight in kg"),
    ] = None,
) -> None:
    """
    Recommend a plan length for a goal.
    """
    weeks = calculate_plan_weeks(goal, current_weight, target_weight)
    views.console.print(f"Recommended plan length: [bold]{format_duration(weeks)}[/bold] ({weeks} weeks)")
