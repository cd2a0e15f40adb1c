"""
FILE: kanban/cli/main.py
PURPOSE: Typer-based CLI for one-shot board management commands
EXPORTS:
  - app (Typer application) with board / column / task sub-apps
  - main() (entry point)
  - get_service() - Service bound to the configured database
  - current_session() - Session of the logged in CLI user
  - unwrap(response) - Value of a successful Response or exit 1
  - save_session_token() / clear_session_token()
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output, logging handler)
  - kanban.core.service (facade)
  - kanban.core.config (Settings)
NOTES:
  - Global options: --db (env KANBAN_DB), --verbose (env KANBAN_LOG_LEVEL)
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - The login token is kept in a `session` file next to the database
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.config import DB_ENV_VAR, Settings
from ..core.repository import Repository
from ..core.service import KanbanService, Response
from ..core.users import Session

# Typer app setup
app = typer.Typer(
    name="kanban",
    help="Kanban boards with WIP limits, in your terminal",
    add_completion=False,
)

board_app = typer.Typer(name="board", help="Board management commands")
column_app = typer.Typer(name="column", help="Column management commands")
task_app = typer.Typer(name="task", help="Task commands")
app.add_typer(board_app, name="board")
app.add_typer(column_app, name="column")
app.add_typer(task_app, name="task")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.1.0"

# Filled by the callback for the duration of one invocation
_state = {"settings": None, "service": None}


def setup_logging(level: str) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@app.callback()
def default_command(
    db: Optional[Path] = typer.Option(
        None, "--db", envvar=DB_ENV_VAR, help="Database file (default: ~/.kanban/kanban.db)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Kanban boards with WIP limits, in your terminal."""
    settings = Settings.from_env(
        db_path=str(db) if db else None,
        log_level="DEBUG" if verbose else None,
    )
    setup_logging(settings.log_level)
    _state["settings"] = settings
    _state["service"] = None


def get_settings() -> Settings:
    if _state["settings"] is None:
        _state["settings"] = Settings.from_env()
    return _state["settings"]


def get_service() -> KanbanService:
    """Service for the configured database, loaded on first use."""
    if _state["service"] is None:
        service = KanbanService(Repository(get_settings().db_path))
        unwrap(service.load_data())
        _state["service"] = service
    return _state["service"]


def unwrap(response: Response) -> Any:
    """Return the value of a successful response, or print the error and exit 1."""
    if not response.success:
        error_console.print(f"[red]Error:[/red] {response.error_message}")
        raise typer.Exit(1)
    return response.value


def save_session_token(token: str) -> None:
    path = get_settings().session_path
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(token)


def clear_session_token() -> None:
    path = get_settings().session_path
    if path is not None and path.exists():
        path.unlink()


def current_session() -> Session:
    """Session of the logged in CLI user, or exit 1 with a hint."""
    path = get_settings().session_path
    token = path.read_text().strip() if path is not None and path.exists() else ""
    if not token:
        error_console.print("[red]Error:[/red] Not logged in. Run 'kanban login <email>' first.")
        raise typer.Exit(1)
    return unwrap(get_service().resume(token))


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # System commands
    version,
    wipe,
    # User commands
    register,
    login,
    logout,
    whoami,
    # Board commands
    board_add,
    board_rm,
    board_join,
    board_ls,
    board_show,
    # Column commands
    column_ls,
    column_add,
    column_rename,
    column_mv,
    column_rm,
    column_limit,
    column_unlimit,
    column_tasks,
    # Task commands
    task_add,
    task_advance,
    task_title,
    task_desc,
    task_due,
    task_assign,
    task_mine,
    task_show,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
