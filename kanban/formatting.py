"""
FILE: kanban/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - BoardFormatter: Class for formatting tasks, columns and boards
  - parse_due_date: Parse ISO dates or relative offsets like "+3d"
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - kanban.core.models (TaskView, ColumnView, BoardView)
NOTES:
  - Works on views only; the CLI never sees domain objects
  - Dates shown as YYYY-MM-DD HH:MM
"""

import json
import re
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from rich.table import Table

from .core.models import BoardView, ColumnView, TaskView, to_local_time

RELATIVE_DUE = re.compile(r"^\+(\d+)([mhdw])$")
RELATIVE_UNITS = {"m": "minutes", "h": "hours", "d": "days", "w": "weeks"}


def _short(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M")


class BoardFormatter:
    """Centralized display formatting."""

    @staticmethod
    def task_table(tasks: List[TaskView], title: str = "Tasks", now: Optional[datetime] = None) -> Table:
        """
        Create Rich table for tasks.

        Overdue due dates are highlighted in red.
        """
        now = now or datetime.now()
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Assignee", style="yellow")
        table.add_column("Due", no_wrap=True)

        for task in tasks:
            due_style = "red" if task.due < now else "green"
            table.add_row(
                str(task.id),
                task.title,
                task.assignee,
                f"[{due_style}]{_short(task.due)}[/{due_style}]",
            )
        return table

    @staticmethod
    def column_table(columns: List[ColumnView], title: str = "Columns") -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("#", style="cyan", width=4, no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Tasks", justify="right")
        table.add_column("Limit", justify="right", style="magenta")

        last = len(columns) - 1
        for column in columns:
            name = column.name
            if column.ordinal == 0:
                name = f"{name} [dim](backlog)[/dim]"
            elif column.ordinal == last:
                name = f"{name} [dim](done)[/dim]"
            limit = "-" if column.limit is None else str(column.limit)
            count_style = "red" if column.limit is not None and column.task_count >= column.limit else "white"
            table.add_row(
                str(column.ordinal),
                name,
                f"[{count_style}]{column.task_count}[/{count_style}]",
                limit,
            )
        return table

    @staticmethod
    def board_table(boards: List[BoardView], title: str = "Boards") -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Creator", style="yellow")
        table.add_column("Columns", justify="right")

        for board in boards:
            table.add_row(str(board.id), board.name, board.creator_email, str(board.done_ordinal + 1))
        return table

    @staticmethod
    def to_json_array(items: Sequence) -> str:
        """Convert views to a JSON array string."""
        return json.dumps([item.to_dict() for item in items], indent=2)

    @staticmethod
    def task_raw_lines(tasks: List[TaskView]) -> List[str]:
        return [f"{task.id}: {task.title} ({task.assignee}, due {_short(task.due)})" for task in tasks]

    @staticmethod
    def column_raw_lines(columns: List[ColumnView]) -> List[str]:
        lines = []
        for column in columns:
            limit = "" if column.limit is None else f"/{column.limit}"
            lines.append(f"{column.ordinal}: {column.name} [{column.task_count}{limit}]")
        return lines


def parse_due_date(value: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse a due date.

    Accepts ISO-8601 ("2026-05-01", "2026-05-01T17:00") or an offset from now
    ("+30m", "+4h", "+3d", "+2w").
    Values with a UTC offset are converted to local time.

    Raises:
        ValueError: If the value matches neither form
    """
    value = value.strip()
    match = RELATIVE_DUE.match(value)
    if match:
        amount, unit = match.groups()
        return to_local_time((now or datetime.now()) + timedelta(**{RELATIVE_UNITS[unit]: int(amount)}))
    return to_local_time(datetime.fromisoformat(value))
