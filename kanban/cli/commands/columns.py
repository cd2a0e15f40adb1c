"""
FILE: kanban/cli/commands/columns.py
PURPOSE: Column commands (column ls, add, rename, mv, rm, limit, unlimit, tasks)
NOTES:
  - Columns are addressed by ordinal (0 = backlog)
  - Every command takes the board name and an optional --creator
"""

from typing import Optional

import typer

from ..main import column_app, console, current_session, get_service, unwrap
from ...formatting import BoardFormatter

CREATOR_HELP = "Creator email (default: you)"


def _board_owner(creator: Optional[str]):
    session = current_session()
    return session, creator or session.email


@column_app.command("ls")
def column_ls(
    board: str = typer.Argument(..., help="Board name"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """List the columns of a board."""
    session, creator = _board_owner(creator)
    columns = unwrap(get_service().get_columns(session, creator, board))

    if json_output:
        console.print(BoardFormatter.to_json_array(columns))
    elif raw:
        for line in BoardFormatter.column_raw_lines(columns):
            console.print(line)
    else:
        console.print(BoardFormatter.column_table(columns, title=board))


@column_app.command("add")
def column_add(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Position of the new column"),
    name: str = typer.Argument(..., help="Column name"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """
    Insert a column; later columns shift right.

    Example:
        kanban column add "Sprint 12" 2 review
    """
    session, creator = _board_owner(creator)
    column = unwrap(get_service().add_column(session, creator, board, ordinal, name))
    console.print(f"[green]✓ Added column[/green] {column.ordinal}: {column.name}")


@column_app.command("rename")
def column_rename(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column ordinal"),
    name: str = typer.Argument(..., help="New name"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Rename a column."""
    session, creator = _board_owner(creator)
    unwrap(get_service().rename_column(session, creator, board, ordinal, name))
    console.print(f"[green]✓ Renamed column[/green] {ordinal} to {name}")


@column_app.command("mv")
def column_mv(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column ordinal"),
    shift: int = typer.Option(..., "--shift", "-s", help="Positions to move (negative = left)"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """
    Move an empty column.

    Example:
        kanban column mv "Sprint 12" 1 --shift 1
    """
    session, creator = _board_owner(creator)
    unwrap(get_service().move_column(session, creator, board, ordinal, shift))
    console.print(f"[green]✓ Moved column[/green] {ordinal} to {ordinal + shift}")


@column_app.command("rm")
def column_rm(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column ordinal"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """
    Remove a column; its tasks merge into the neighbouring column.

    The backlog merges forward, any other column merges backward.
    """
    session, creator = _board_owner(creator)
    unwrap(get_service().remove_column(session, creator, board, ordinal))
    console.print(f"[green]✓ Removed column[/green] {ordinal}")


@column_app.command("limit")
def column_limit(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column ordinal"),
    limit: int = typer.Argument(..., help="Maximum number of tasks"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Set a work-in-progress limit on a column."""
    session, creator = _board_owner(creator)
    unwrap(get_service().limit_column(session, creator, board, ordinal, limit))
    console.print(f"[green]✓ Column {ordinal} limited to[/green] {limit}")


@column_app.command("unlimit")
def column_unlimit(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column ordinal"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Remove the work-in-progress limit of a column."""
    session, creator = _board_owner(creator)
    unwrap(get_service().remove_column_limit(session, creator, board, ordinal))
    console.print(f"[green]✓ Column {ordinal} is unlimited[/green]")


@column_app.command("tasks")
def column_tasks(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column ordinal"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """List the tasks of one column."""
    session, creator = _board_owner(creator)
    service = get_service()
    tasks = unwrap(service.get_column(session, creator, board, ordinal))

    if json_output:
        console.print(BoardFormatter.to_json_array(tasks))
    elif raw:
        for line in BoardFormatter.task_raw_lines(tasks):
            console.print(line)
    else:
        if not tasks:
            console.print("[dim]No tasks found[/dim]")
            return
        name = unwrap(service.get_column_name(session, creator, board, ordinal))
        limit = unwrap(service.get_column_limit(session, creator, board, ordinal))
        suffix = "" if limit is None else f" ({len(tasks)}/{limit})"
        console.print(BoardFormatter.task_table(tasks, title=f"{name}{suffix}"))
