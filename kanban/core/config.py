"""
FILE: kanban/core/config.py
PURPOSE: Runtime configuration (database location, log level)
EXPORTS:
  - Settings (dataclass)
  - DEFAULT_DB_DIR / DEFAULT_DB_PATH
DEPENDENCIES:
  - dataclasses, os, pathlib (stdlib)
NOTES:
  - Database stored at ~/.kanban/kanban.db unless KANBAN_DB says otherwise
  - The CLI session token lives next to the database file
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Database file location (cross-platform)
DEFAULT_DB_DIR = Path.home() / ".kanban"
DEFAULT_DB_PATH = DEFAULT_DB_DIR / "kanban.db"

DB_ENV_VAR = "KANBAN_DB"
LOG_LEVEL_ENV_VAR = "KANBAN_LOG_LEVEL"

SESSION_FILE_NAME = "session"


@dataclass
class Settings:
    """Runtime configuration for the board manager."""

    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    log_level: str = "WARNING"

    def __post_init__(self):
        if str(self.db_path) != ":memory:":
            self.db_path = Path(self.db_path).expanduser()
        self.log_level = self.log_level.upper()

    @property
    def session_path(self) -> Optional[Path]:
        """Where the CLI keeps the token of the logged-in user."""
        if str(self.db_path) == ":memory:":
            return None
        return Path(self.db_path).parent / SESSION_FILE_NAME

    @classmethod
    def from_env(cls, db_path: Optional[str] = None, log_level: Optional[str] = None) -> "Settings":
        """Build settings from explicit values, then environment, then defaults."""
        db_value = db_path or os.environ.get(DB_ENV_VAR)
        level_value = log_level or os.environ.get(LOG_LEVEL_ENV_VAR)

        settings = cls()
        if db_value:
            settings = cls(db_path=db_value)
        if level_value:
            settings.log_level = level_value.upper()
        return settings
