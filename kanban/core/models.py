"""
FILE: kanban/core/models.py
PURPOSE: Row records for persistence and plain views for the service boundary
EXPORTS:
  - UserRecord, SessionRecord, BoardRecord, ColumnRecord, TaskRecord (dataclasses)
  - TaskView, ColumnView, BoardView (dataclasses)
  - parse_timestamp(value) -> datetime
  - to_local_time(value) -> naive local datetime
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - json (stdlib)
  - typing (stdlib)
NOTES:
  - All records have from_row() for SQLite row conversion
  - Views are what crosses the service facade; domain objects never do
  - Timestamps stored as ISO-8601 strings, exposed as datetime on views
  - Due dates are kept naive in local time; aware values are converted on entry
  - Unlimited columns store NULL, never a magic number
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional, Union
import json


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Convert an ISO-8601 string from the database into a datetime."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def to_local_time(value):
    """Convert an aware datetime to naive local time; anything else passes through."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


@dataclass
class UserRecord:
    """A registered user row."""

    id: int
    email: str
    password_hash: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "UserRecord":
        """Convert SQLite row to UserRecord object."""
        return cls(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
        )


@dataclass
class SessionRecord:
    """A persisted login session."""

    token: str
    email: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "SessionRecord":
        """Convert SQLite row to SessionRecord object."""
        return cls(
            token=row["token"],
            email=row["email"],
            created_at=row["created_at"],
        )


@dataclass
class BoardRecord:
    """A board row; members and columns live in their own tables."""

    id: int
    creator_email: str
    name: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "BoardRecord":
        """Convert SQLite row to BoardRecord object."""
        return cls(
            id=row["id"],
            creator_email=row["creator_email"],
            name=row["name"],
            created_at=row["created_at"],
        )


@dataclass
class ColumnRecord:
    """A column row of one board."""

    id: int
    board_id: int
    ordinal: int
    name: str
    task_limit: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "ColumnRecord":
        """Convert SQLite row to ColumnRecord object."""
        return cls(
            id=row["id"],
            board_id=row["board_id"],
            ordinal=row["ordinal"],
            name=row["name"],
            task_limit=row["task_limit"],
        )


@dataclass
class TaskRecord:
    """A task row."""

    id: int
    column_id: int
    title: str
    assignee: str
    due: str
    description: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "TaskRecord":
        """Convert SQLite row to TaskRecord object."""
        return cls(
            id=row["id"],
            column_id=row["column_id"],
            title=row["title"],
            description=row["description"],
            assignee=row["assignee"],
            due=row["due"],
            created_at=row["created_at"],
        )


# --- Boundary views ---


@dataclass(frozen=True)
class TaskView:
    """Read-only snapshot of a task handed to callers of the facade."""

    id: int
    created: datetime
    title: str
    description: Optional[str]
    due: datetime
    assignee: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created"] = self.created.isoformat()
        data["due"] = self.due.isoformat()
        return data

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass(frozen=True)
class ColumnView:
    """Read-only snapshot of a column."""

    name: str
    ordinal: int
    limit: Optional[int] = None
    task_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize column to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass(frozen=True)
class BoardView:
    """Read-only snapshot of a board."""

    id: int
    name: str
    creator_email: str
    backlog_ordinal: int
    done_ordinal: int

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize board to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
