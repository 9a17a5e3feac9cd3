"""Progress commands: streaks, history, achievements, stats, clear."""

import json
from typing import Annotated, Optional

import typer

from ...io.serializers import (
    ValidationError,
    history_entry_to_dict,
    summary_to_dict,
    validate_track,
)
from ...io.storage import StorageError
from .. import views
from ..app import StoreOption, TrackOption, app, get_tracker


@app.command()
def streaks(
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    store_path: StoreOption = None,
) -> None:
    """
    Show current and longest streaks with weekly and monthly consistency.
    """
    summary = get_tracker(store_path).summary()

    if json_out:
        data = summary_to_dict(summary)
        del data["history"]
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return

    views.console.print()
    views.console.print(views.format_streak_display(summary))
    views.console.print()


@app.command()
def history(
    days: Annotated[
        int,
        typer.Option("--days", "-n", min=1, help="Number of most recent days to show"),
    ] = 14,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    store_path: StoreOption = None,
) -> None:
    """
    Show which days each track was done.
    """
    entries = get_tracker(store_path).summary().history[-days:]

    if json_out:
        print(json.dumps([history_entry_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        views.print_info("No history yet.")
        return
    views.console.print(views.format_history_table(entries))


@app.command()
def achievements(store_path: StoreOption = None) -> None:
    """
    Show achievements and streak milestones.
    """
    summary = get_tracker(store_path).summary()
    views.console.print()
    views.console.print(views.format_achievements_table(summary.achievements))
    views.console.print()
    views.console.print(views.format_milestones_table(summary.milestones))
    views.console.print()


@app.command()
def stats(
    track: TrackOption = "workout",
    period: Annotated[
        str,
        typer.Option("--period", "-p", help="week or month"),
    ] = "week",
    number: Annotated[
        Optional[int],
        typer.Option("--number", "-n", min=1, help="Plan week or month number (default: current)"),
    ] = None,
    store_path: StoreOption = None,
) -> None:
    """
    Show completion and calorie totals for a plan week or month.
    """
    tracker = get_tracker(store_path)
    try:
        validate_track(track)
        result = tracker.period_stats(track, period, number)
    except (ValidationError, StorageError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if result is None:
        views.print_info(f"No {track} plan. Run 'import-plan --track {track} FILE' first.")
        raise typer.Exit(1)

    views.console.print(views.format_period_stats(track, period, result))


@app.command()
def clear(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    store_path: StoreOption = None,
) -> None:
    """
    Wipe the signed-in user's completion logs and achievements. Plans are kept.
    """
    tracker = get_tracker(store_path)
    if tracker.current_user_id() is None:
        views.print_error("No user signed in.")
        raise typer.Exit(1)

    if not force and not views.confirm_action("Delete all logged progress?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        tracker.clear()
    except StorageError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success("Progress cleared")
