"""
CLI entry point using Typer.

Provides commands for plan and progress tracking:
- login / logout / whoami: choose whose plans and logs are used
- import-plan: parse a generated workout or diet plan
- week: show the current plan week with day statuses
- done: log a completed exercise or meal
- streaks / history / achievements / stats: progress views
- reset-plan / clear: remove a plan or wipe logged progress
"""

import logging
from typing import Annotated

import typer

from .app import app
from .commands import account, plans, progress  # noqa: F401  (registers commands)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log storage and parser diagnostics"),
    ] = False,
) -> None:
    """
    Track workout and diet plan progress, streaks and achievements.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
