"""
FILE: kanban/cli/commands/system.py
PURPOSE: System commands (version, wipe)
"""

import typer

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, __version__, clear_session_token, get_service, unwrap


@app.command()
def version():
    """Show Kanban version."""
    console.print(f"Kanban v{__version__}")


@app.command()
def wipe(
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete ALL users, boards, columns and tasks.

    Example:
        kanban wipe --yes
    """
    if not yes:
        console.print("[yellow]This deletes every user, board and task.[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    unwrap(get_service().delete_data())
    clear_session_token()
    console.print("[green]✓ All data deleted[/green]")
