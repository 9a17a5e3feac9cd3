"""Account commands: login, logout, whoami."""

from typing import Annotated

import typer

from ...io.accounts import clear_current_user_id
from ...io.storage import StorageError
from .. import views
from ..app import StoreOption, app, get_tracker


@app.command()
def login(
    user_id: Annotated[str, typer.Argument(help="User id to sign in as")],
    store_path: StoreOption = None,
) -> None:
    """
    Sign in as a user. Plans and logs are kept separately per user.
    """
    tracker = get_tracker(store_path)
    try:
        tracker.switch_user(user_id)
    except (ValueError, StorageError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Signed in as {user_id.strip()}")


@app.command()
def logout(store_path: StoreOption = None) -> None:
    """
    Sign out. Stored progress is kept for the next login.
    """
    tracker = get_tracker(store_path)
    try:
        clear_current_user_id(tracker.store.storage)
    except StorageError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success("Signed out")


@app.command()
def whoami(store_path: StoreOption = None) -> None:
    """
    Show the signed-in user.
    """
    user_id = get_tracker(store_path).current_user_id()
    if user_id is None:
        views.print_info("Not signed in. Run 'login USER' first.")
        raise typer.Exit(1)
    views.console.print(user_id)
