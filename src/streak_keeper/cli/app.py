"""Shared Typer app object, shared option types, and tracker utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.engine.config_loader import get_plan_ttls
from ..io.progress_store import open_store
from ..tracker import ProgressTracker

# Shared --store option type used across all commands
StoreOption = Annotated[
    Optional[Path],
    typer.Option("--store", "-s", help="Path to the JSON store file"),
]

# Shared --track option type
TrackOption = Annotated[
    str,
    typer.Option("--track", "-t", help="Plan track: workout or diet"),
]

app = typer.Typer(
    name="streak-keeper",
    help="Track workout and diet plan progress, streaks and achievements.",
    no_args_is_help=True,
)


def get_tracker(store_path: Path | None) -> ProgressTracker:
    """Get a tracker over the store at store_path or the configured default."""
    return ProgressTracker(open_store(store_path), plan_ttls=get_plan_ttls())
