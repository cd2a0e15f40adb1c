"""
FILE: kanban/cli/commands/boards.py
PURPOSE: Board commands (board add, board rm, board join, board ls, board show)
"""

from typing import Optional

import typer

from ..main import board_app, console, current_session, get_service, unwrap
from ...formatting import BoardFormatter


@board_app.command("add")
def board_add(
    name: str = typer.Argument(..., help="Board name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a board with backlog, in progress and done columns.

    Example:
        kanban board add "Sprint 12"
    """
    session = current_session()
    board = unwrap(get_service().add_board(session, name))

    if json_output:
        console.print(board.to_json())
    elif raw:
        console.print(f"{board.id}: {board.name}")
    else:
        console.print(f"[green]✓ Created board[/green] [bold]{board.name}[/bold]")


@board_app.command("rm")
def board_rm(
    name: str = typer.Argument(..., help="Board name"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete one of your boards with all its columns and tasks.

    Example:
        kanban board rm "Sprint 12" --yes
    """
    session = current_session()
    if not yes and not typer.confirm(f"Delete board '{name}' and all its tasks?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    unwrap(get_service().remove_board(session, session.email, name))
    console.print(f"[green]✓ Deleted board[/green] {name}")


@board_app.command("join")
def board_join(
    name: str = typer.Argument(..., help="Board name"),
    creator: str = typer.Option(..., "--creator", "-c", help="Email of the board's creator"),
):
    """
    Become a member of someone else's board.

    Example:
        kanban board join "Sprint 12" --creator alice@example.com
    """
    session = current_session()
    board = unwrap(get_service().join_board(session, creator, name))
    console.print(f"[green]✓ Joined[/green] {board.name} [dim]by {board.creator_email}[/dim]")


@board_app.command("ls")
def board_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """List boards you created or joined."""
    session = current_session()
    boards = unwrap(get_service().get_boards(session))

    if json_output:
        console.print(BoardFormatter.to_json_array(boards))
    elif raw:
        for board in boards:
            console.print(f"{board.name} ({board.creator_email})")
    else:
        if not boards:
            console.print("[dim]No boards found[/dim]")
            return
        console.print(BoardFormatter.board_table(boards))
        console.print(f"\n[dim]Total: {len(boards)} board(s)[/dim]")


@board_app.command("show")
def board_show(
    name: str = typer.Argument(..., help="Board name"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help="Creator email (default: you)"),
):
    """
    Show every column of a board with its tasks.

    Example:
        kanban board show "Sprint 12"
    """
    session = current_session()
    creator = creator or session.email
    service = get_service()

    columns = unwrap(service.get_columns(session, creator, name))
    console.print(BoardFormatter.column_table(columns, title=name))
    for column in columns:
        tasks = unwrap(service.get_column(session, creator, name, column.ordinal))
        if tasks:
            console.print(BoardFormatter.task_table(tasks, title=column.name))
