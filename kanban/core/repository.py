"""
FILE: kanban/core/repository.py
PURPOSE: Database operations and SQLite connection management
EXPORTS:
  - Repository (class)
    - users:       create_user, list_users
    - sessions:    create_session, list_sessions, delete_session
    - boards:      create_board, list_boards, delete_board
    - memberships: create_membership, list_memberships, delete_memberships
    - columns:     create_column, list_columns, update_column, delete_column
    - tasks:       create_task, list_tasks, update_task, delete_task
    - delete_all()
DEPENDENCIES:
  - sqlite3 (stdlib)
  - pathlib (stdlib)
  - datetime (stdlib)
  - kanban.core.models (records)
  - kanban.core.exceptions (RepositoryError)
NOTES:
  - One connection per Repository; ":memory:" works for tests
  - Auto-creates directory and initializes schema on first connection
  - Returns records (TaskRecord, etc.), never raw rows
  - Updates and deletes that touch zero rows raise RepositoryError
  - No ON DELETE CASCADE: callers delete children before parents
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import DEFAULT_DB_PATH
from .exceptions import RepositoryError
from .models import (
    BoardRecord,
    ColumnRecord,
    SessionRecord,
    TaskRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sessions (
    token TEXT PRIMARY KEY,
    email TEXT NOT NULL REFERENCES users(email),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS boards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    creator_email TEXT NOT NULL,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (creator_email, name)
);

CREATE TABLE IF NOT EXISTS memberships (
    board_id INTEGER NOT NULL REFERENCES boards(id),
    email TEXT NOT NULL,
    PRIMARY KEY (board_id, email)
);

CREATE TABLE IF NOT EXISTS columns (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    board_id INTEGER NOT NULL REFERENCES boards(id),
    ordinal INTEGER NOT NULL,
    name TEXT NOT NULL,
    task_limit INTEGER
);

CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    column_id INTEGER NOT NULL REFERENCES columns(id),
    title TEXT NOT NULL,
    description TEXT,
    assignee TEXT NOT NULL,
    due TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""

# Fields that update_column()/update_task() may touch
COLUMN_FIELDS = ("name", "ordinal", "task_limit")
TASK_FIELDS = ("column_id", "title", "description", "assignee", "due")


def _to_db(value: Any) -> Any:
    """Store datetimes as ISO-8601 strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class Repository:
    """SQLite-backed persistence for users, sessions, boards, columns and tasks."""

    def __init__(self, db_path: Union[str, Path] = DEFAULT_DB_PATH):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    # --- Connection management ---

    def get_connection(self) -> sqlite3.Connection:
        """
        Get SQLite connection to the Kanban database.

        Creates the database directory if it doesn't exist.
        Enables row_factory for dict-like row access.
        Enables foreign key constraints.
        Initializes database schema on first connection.
        """
        if self._conn is not None:
            return self._conn

        if str(self.db_path) != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            self.init_database(conn)
        except sqlite3.Error as e:
            logger.error("Could not open database %s: %s", self.db_path, e)
            raise RepositoryError(f"Could not open database: {e}") from e

        self._conn = conn
        logger.debug("Opened database %s", self.db_path)
        return conn

    @staticmethod
    def init_database(conn: sqlite3.Connection) -> None:
        """
        Initialize database schema if tables don't exist.

        Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
        """
        conn.executescript(SCHEMA_SQL)
        conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Run one statement and commit, translating sqlite errors."""
        conn = self.get_connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Database statement failed: %s", e)
            raise RepositoryError(str(e)) from e
        return cursor

    def _query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        conn = self.get_connection()
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error("Database query failed: %s", e)
            raise RepositoryError(str(e)) from e

    def _expect_rows(self, cursor: sqlite3.Cursor, what: str) -> None:
        # An update or delete that touched nothing means memory and storage drifted apart
        if cursor.rowcount == 0:
            logger.error("%s affected no rows", what)
            raise RepositoryError(f"{what} affected no rows")

    def _update(self, table: str, allowed: tuple, row_id: int, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - set(allowed)
        if unknown or not fields:
            raise RepositoryError(f"Cannot update {table} fields: {sorted(unknown) or 'none'}")

        assignments = ", ".join(f"{name} = ?" for name in fields)
        values = tuple(_to_db(value) for value in fields.values())
        cursor = self._execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?",
            values + (row_id,),
        )
        self._expect_rows(cursor, f"Update of {table} {row_id}")

    def _delete(self, table: str, row_id: int) -> None:
        cursor = self._execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
        self._expect_rows(cursor, f"Delete of {table} {row_id}")

    # --- User Operations ---

    def create_user(self, email: str, password_hash: str) -> UserRecord:
        """Insert a user row. Email uniqueness is enforced by the database."""
        now = datetime.now().isoformat()
        cursor = self._execute(
            "INSERT INTO users (email, password_hash, created_at) VALUES (?, ?, ?)",
            (email, password_hash, now),
        )
        return UserRecord(id=cursor.lastrowid, email=email, password_hash=password_hash, created_at=now)

    def list_users(self) -> List[UserRecord]:
        rows = self._query("SELECT * FROM users ORDER BY id")
        return [UserRecord.from_row(row) for row in rows]

    # --- Session Operations ---

    def create_session(self, token: str, email: str) -> SessionRecord:
        now = datetime.now().isoformat()
        self._execute(
            "INSERT INTO sessions (token, email, created_at) VALUES (?, ?, ?)",
            (token, email, now),
        )
        return SessionRecord(token=token, email=email, created_at=now)

    def list_sessions(self) -> List[SessionRecord]:
        rows = self._query("SELECT * FROM sessions ORDER BY created_at")
        return [SessionRecord.from_row(row) for row in rows]

    def delete_session(self, token: str) -> None:
        cursor = self._execute("DELETE FROM sessions WHERE token = ?", (token,))
        self._expect_rows(cursor, f"Delete of session for token {token[:8]}")

    # --- Board Operations ---

    def create_board(self, creator_email: str, name: str) -> BoardRecord:
        """Insert a board row. (creator_email, name) must be unique."""
        now = datetime.now().isoformat()
        cursor = self._execute(
            "INSERT INTO boards (creator_email, name, created_at) VALUES (?, ?, ?)",
            (creator_email, name, now),
        )
        return BoardRecord(id=cursor.lastrowid, creator_email=creator_email, name=name, created_at=now)

    def list_boards(self) -> List[BoardRecord]:
        rows = self._query("SELECT * FROM boards ORDER BY id")
        return [BoardRecord.from_row(row) for row in rows]

    def delete_board(self, board_id: int) -> None:
        """Delete a board row. Memberships and columns must already be gone."""
        self._delete("boards", board_id)

    # --- Membership Operations ---

    def create_membership(self, board_id: int, email: str) -> None:
        self._execute(
            "INSERT INTO memberships (board_id, email) VALUES (?, ?)",
            (board_id, email),
        )

    def list_memberships(self, board_id: int) -> List[str]:
        rows = self._query(
            "SELECT email FROM memberships WHERE board_id = ? ORDER BY rowid",
            (board_id,),
        )
        return [row["email"] for row in rows]

    def delete_memberships(self, board_id: int) -> None:
        self._execute("DELETE FROM memberships WHERE board_id = ?", (board_id,))

    # --- Column Operations ---

    def create_column(
        self,
        board_id: int,
        ordinal: int,
        name: str,
        task_limit: Optional[int] = None,
    ) -> ColumnRecord:
        cursor = self._execute(
            "INSERT INTO columns (board_id, ordinal, name, task_limit) VALUES (?, ?, ?, ?)",
            (board_id, ordinal, name, task_limit),
        )
        return ColumnRecord(
            id=cursor.lastrowid,
            board_id=board_id,
            ordinal=ordinal,
            name=name,
            task_limit=task_limit,
        )

    def list_columns(self, board_id: int) -> List[ColumnRecord]:
        """List columns of a board, ordered by ordinal."""
        rows = self._query(
            "SELECT * FROM columns WHERE board_id = ? ORDER BY ordinal",
            (board_id,),
        )
        return [ColumnRecord.from_row(row) for row in rows]

    def update_column(self, column_id: int, **fields: Any) -> None:
        """Update name, ordinal or task_limit of a column."""
        self._update("columns", COLUMN_FIELDS, column_id, fields)

    def delete_column(self, column_id: int) -> None:
        self._delete("columns", column_id)

    # --- Task Operations ---

    def create_task(
        self,
        column_id: int,
        title: str,
        description: Optional[str],
        assignee: str,
        due: datetime,
    ) -> TaskRecord:
        """
        Create a new task.

        Returns:
            Newly created TaskRecord with id and created_at assigned
        """
        now = datetime.now().isoformat()
        cursor = self._execute(
            """
            INSERT INTO tasks (column_id, title, description, assignee, due, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (column_id, title, description, assignee, _to_db(due), now),
        )
        return TaskRecord(
            id=cursor.lastrowid,
            column_id=column_id,
            title=title,
            description=description,
            assignee=assignee,
            due=_to_db(due),
            created_at=now,
        )

    def list_tasks(self, column_id: int) -> List[TaskRecord]:
        """List tasks of a column, oldest first."""
        rows = self._query(
            "SELECT * FROM tasks WHERE column_id = ? ORDER BY id",
            (column_id,),
        )
        return [TaskRecord.from_row(row) for row in rows]

    def update_task(self, task_id: int, **fields: Any) -> None:
        """Update one or more task fields (title, description, assignee, due, column_id)."""
        self._update("tasks", TASK_FIELDS, task_id, fields)

    def delete_task(self, task_id: int) -> None:
        self._delete("tasks", task_id)

    # --- Wipe ---

    def delete_all(self) -> None:
        """Remove every row of every table, children first."""
        for table in ("tasks", "columns", "memberships", "boards", "sessions", "users"):
            self._execute(f"DELETE FROM {table}")
        logger.debug("Deleted all persisted data")
