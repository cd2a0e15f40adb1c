"""
FILE: kanban/cli/commands/tasks.py
PURPOSE: Task commands (task add, advance, title, desc, due, assign, mine, show)
NOTES:
  - Tasks are addressed by board, column ordinal and task id
  - Only the assignee can edit or advance a task; done tasks are frozen
"""

from datetime import datetime
from typing import Optional

import typer

from ..main import (
    console,
    current_session,
    error_console,
    get_service,
    task_app,
    unwrap,
)
from ...formatting import BoardFormatter, parse_due_date

CREATOR_HELP = "Creator email (default: you)"


def _board_owner(creator: Optional[str]):
    session = current_session()
    return session, creator or session.email


def _due(value: str) -> datetime:
    try:
        return parse_due_date(value)
    except ValueError:
        error_console.print(
            f"[red]Error:[/red] Invalid due date '{value}'. Use YYYY-MM-DD[THH:MM] or +N[m|h|d|w]"
        )
        raise typer.Exit(1)


def _print_task(task, json_output: bool, raw: bool, message: str) -> None:
    if json_output:
        console.print(task.to_json())
    elif raw:
        console.print(f"{task.id}: {task.title}")
    else:
        console.print(f"[green]✓ {message} [bold]#{task.id}[/bold]:[/green] {task.title}")


@task_app.command("add")
def task_add(
    board: str = typer.Argument(..., help="Board name"),
    title: str = typer.Argument(..., help="Task title (up to 50 characters)"),
    due: str = typer.Option(..., "--due", "-d", help="Due date: YYYY-MM-DD[THH:MM] or +N[m|h|d|w]"),
    description: Optional[str] = typer.Option(None, "--desc", help="Description (up to 300 characters)"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a task in the backlog, assigned to you.

    Example:
        kanban task add "Sprint 12" "Write release notes" --due +3d
    """
    session, creator = _board_owner(creator)
    task = unwrap(get_service().add_task(session, creator, board, title, description, _due(due)))
    _print_task(task, json_output, raw, "Created task")


@task_app.command("advance")
def task_advance(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column the task is in"),
    task_id: int = typer.Argument(..., help="Task ID"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move a task to the next column.

    Example:
        kanban task advance "Sprint 12" 0 7
    """
    session, creator = _board_owner(creator)
    task = unwrap(get_service().advance_task(session, creator, board, ordinal, task_id))
    _print_task(task, json_output, raw, f"Advanced to column {ordinal + 1}")


@task_app.command("title")
def task_title(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column the task is in"),
    task_id: int = typer.Argument(..., help="Task ID"),
    title: str = typer.Argument(..., help="New title"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Change the title of a task."""
    session, creator = _board_owner(creator)
    task = unwrap(get_service().update_task_title(session, creator, board, ordinal, task_id, title))
    _print_task(task, False, False, "Updated task")


@task_app.command("desc")
def task_desc(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column the task is in"),
    task_id: int = typer.Argument(..., help="Task ID"),
    description: str = typer.Argument(..., help="New description (empty string clears it)"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Change the description of a task."""
    session, creator = _board_owner(creator)
    task = unwrap(
        get_service().update_task_description(session, creator, board, ordinal, task_id, description or None)
    )
    _print_task(task, False, False, "Updated task")


@task_app.command("due")
def task_due(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column the task is in"),
    task_id: int = typer.Argument(..., help="Task ID"),
    due: str = typer.Argument(..., help="Due date: YYYY-MM-DD[THH:MM] or +N[m|h|d|w]"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Change the due date of a task."""
    session, creator = _board_owner(creator)
    task = unwrap(get_service().update_task_due_date(session, creator, board, ordinal, task_id, _due(due)))
    _print_task(task, False, False, "Updated task")


@task_app.command("assign")
def task_assign(
    board: str = typer.Argument(..., help="Board name"),
    ordinal: int = typer.Argument(..., help="Column the task is in"),
    task_id: int = typer.Argument(..., help="Task ID"),
    assignee: str = typer.Argument(..., help="Email of a board member"),
    creator: Optional[str] = typer.Option(None, "--creator", "-c", help=CREATOR_HELP),
):
    """Hand a task to another board member."""
    session, creator = _board_owner(creator)
    task = unwrap(get_service().assign_task(session, creator, board, ordinal, task_id, assignee))
    console.print(f"[green]✓ Assigned [bold]#{task.id}[/bold] to[/green] {task.assignee}")


@task_app.command("mine")
def task_mine(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """List your in-progress tasks across all boards."""
    session = current_session()
    tasks = unwrap(get_service().in_progress_tasks(session))

    if json_output:
        console.print(BoardFormatter.to_json_array(tasks))
    elif raw:
        for line in BoardFormatter.task_raw_lines(tasks):
            console.print(line)
    else:
        if not tasks:
            console.print("[dim]Nothing in progress[/dim]")
            return
        console.print(BoardFormatter.task_table(tasks, title="In progress"))
        console.print(f"\n[dim]Total: {len(tasks)} task(s)[/dim]")


@task_app.command("show")
def task_show(
    task_id: int = typer.Argument(..., help="Task ID"),
):
    """Show which board and column a task is in."""
    session = current_session()
    service = get_service()
    board = unwrap(service.get_task_board(session, task_id))
    column = unwrap(service.get_task_column(session, task_id))
    console.print(f"Task [bold]#{task_id}[/bold]")
    console.print(f"  Board:  {board.name} [dim]by {board.creator_email}[/dim]")
    console.print(f"  Column: {column.ordinal}: {column.name}")
