"""
FILE: kanban/core/column.py
PURPOSE: Columns (WIP-limited task containers) and the ordered column set of a board
EXPORTS:
  - Column (class)
  - ColumnSet (class)
DEPENDENCIES:
  - logging, typing (stdlib)
  - kanban.core.task (Task)
  - kanban.core.repository (Repository)
  - kanban.core.models (ColumnRecord, ColumnView)
  - kanban.core.exceptions
NOTES:
  - Ordinals always equal list position; every structural change renumbers all
  - The first column is the backlog, the last one is done
  - Removing a column merges its tasks into a neighbour: forward for the
    backlog, backward for everything else
  - A limit of None means unlimited
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .constants import BACKLOG_ORDINAL, DEFAULT_COLUMNS, MIN_COLUMN_COUNT
from .exceptions import (
    ColumnNotFoundError,
    InvalidArgumentError,
    LimitReachedError,
    TaskNotFoundError,
)
from .models import ColumnRecord, ColumnView
from .repository import Repository
from .task import Task

logger = logging.getLogger(__name__)


class Column:
    """Tasks keyed by id, with a name, a position and an optional WIP limit."""

    def __init__(self, repository: Repository, record: ColumnRecord, tasks: Iterable[Task] = ()):
        self._repository = repository
        self.id = record.id
        self.board_id = record.board_id
        self._name = record.name
        self._ordinal = record.ordinal
        self._limit = record.task_limit
        self._tasks: Dict[int, Task] = {task.id: task for task in tasks}

    @classmethod
    def create(cls, repository: Repository, board_id: int, ordinal: int, name: str) -> "Column":
        record = repository.create_column(board_id, ordinal, name)
        logger.debug("Column '%s' created at ordinal %s of board %s", name, ordinal, board_id)
        return cls(repository, record)

    @classmethod
    def load(cls, repository: Repository, record: ColumnRecord) -> "Column":
        """Rebuild a column and its tasks from storage."""
        tasks = [Task.from_record(repository, task_record) for task_record in repository.list_tasks(record.id)]
        logger.debug("Column '%s' loaded with %s task(s)", record.name, len(tasks))
        return cls(repository, record, tasks)

    # --- Properties ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def ordinal(self) -> int:
        return self._ordinal

    @ordinal.setter
    def ordinal(self, value: int) -> None:
        if value == self._ordinal:
            return
        self._repository.update_column(self.id, ordinal=value)
        self._ordinal = value

    @property
    def limit(self) -> Optional[int]:
        """The WIP limit, or None when the column is unlimited."""
        return self._limit

    @property
    def count(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def __repr__(self) -> str:
        return f"Column(id={self.id}, name={self._name!r}, ordinal={self._ordinal}, tasks={self.count})"

    # --- Limits ---

    def has_room(self, extra: int = 1) -> bool:
        """Whether `extra` more tasks fit under the limit."""
        return self._limit is None or self.count + extra <= self._limit

    def set_limit(self, limit: int) -> None:
        """
        Set the WIP limit.

        Raises:
            InvalidArgumentError: If limit is not positive or below the current task count
        """
        if limit is None or limit <= 0:
            logger.error("Invalid limit %r on column '%s'", limit, self._name)
            raise InvalidArgumentError("Limit must be bigger than 0")
        if limit < self.count:
            logger.error("Limit %s below task count %s on column '%s'", limit, self.count, self._name)
            raise InvalidArgumentError("Limit must not be below the current task count")

        self._repository.update_column(self.id, task_limit=limit)
        self._limit = limit
        logger.debug("Limit set to %s on column '%s'", limit, self._name)

    def remove_limit(self) -> None:
        """Make the column unlimited. Calling it on an unlimited column is a no-op."""
        if self._limit is None:
            return
        self._repository.update_column(self.id, task_limit=None)
        self._limit = None
        logger.debug("Limit removed on column '%s'", self._name)

    # --- Tasks ---

    def get_tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def get_task(self, task_id: int) -> Task:
        """
        Get a task of this column.

        Raises:
            TaskNotFoundError: If the task is not in this column
        """
        if task_id not in self._tasks:
            logger.error("Task %s not in column '%s'", task_id, self._name)
            raise TaskNotFoundError(task_id)
        return self._tasks[task_id]

    def get_assignee_tasks(self, email: str) -> List[Task]:
        return [task for task in self._tasks.values() if task.assignee == email]

    def add_task(self, task: Task) -> Task:
        """
        Add a task and point it at this column.

        Raises:
            InvalidArgumentError: If task is None or its id is already here
            LimitReachedError: If the column is full
        """
        if task is None:
            logger.error("Tried to add a null task to column '%s'", self._name)
            raise InvalidArgumentError("Task must not be None")
        if not self.has_room():
            logger.error("Column '%s' is full, cannot add task %s", self._name, task.id)
            raise LimitReachedError(f"Column '{self._name}' reached its limit of {self._limit}")
        if task.id in self._tasks:
            logger.error("Task %s already in column '%s'", task.id, self._name)
            raise InvalidArgumentError(f"Task {task.id} is already in column '{self._name}'")

        task.move_column(self.id)
        self._tasks[task.id] = task
        logger.debug("Added task %s to column '%s'", task.id, self._name)
        return task

    def remove_task(self, task_id: int) -> Task:
        """
        Take a task out of this column. The caller owns it afterwards.

        Raises:
            TaskNotFoundError: If the task is not in this column
        """
        if task_id not in self._tasks:
            logger.error("Cannot remove task %s, not in column '%s'", task_id, self._name)
            raise TaskNotFoundError(task_id)
        task = self._tasks.pop(task_id)
        logger.debug("Removed task %s from column '%s'", task_id, self._name)
        return task

    def consume_column(self, other: "Column") -> None:
        """
        Move every task of `other` into this column.

        Raises:
            LimitReachedError: If the merged tasks would not fit; nothing moves
        """
        if not self.has_room(other.count):
            logger.error(
                "Column '%s' cannot take %s task(s) from '%s'",
                self._name, other.count, other.name,
            )
            raise LimitReachedError(f"Column '{self._name}' cannot hold the merged tasks")

        for task in other.get_tasks():
            task.move_column(self.id)
            self._tasks[task.id] = task
        other._tasks.clear()
        logger.debug("Column '%s' consumed column '%s'", self._name, other.name)

    # --- Lifecycle ---

    def rename(self, name: str) -> None:
        """
        Raises:
            InvalidArgumentError: If name is empty
        """
        if not name:
            logger.error("Tried to rename column '%s' to an empty name", self._name)
            raise InvalidArgumentError("Column name must not be empty")
        self._repository.update_column(self.id, name=name)
        self._name = name
        logger.debug("Column %s renamed to '%s'", self.id, name)

    def remove(self) -> None:
        """Delete this column and every task in it."""
        for task in self.get_tasks():
            task.remove()
        self._tasks.clear()
        self._repository.delete_column(self.id)
        logger.debug("Deleted column '%s'", self._name)

    def to_view(self) -> ColumnView:
        return ColumnView(name=self._name, ordinal=self._ordinal, limit=self._limit, task_count=self.count)


class ColumnSet:
    """
    The ordered columns of one board.

    Invariants: ordinals are 0..n-1 in list order, ordinal 0 is the backlog,
    ordinal n-1 is done, and removal never goes below MIN_COLUMN_COUNT.
    """

    def __init__(self, repository: Repository, board_id: int, columns: List[Column]):
        self._repository = repository
        self.board_id = board_id
        self._columns = columns

    @classmethod
    def create(cls, repository: Repository, board_id: int) -> "ColumnSet":
        """Create the default backlog / in progress / done columns."""
        columns = [
            Column.create(repository, board_id, ordinal, name)
            for ordinal, name in enumerate(DEFAULT_COLUMNS)
        ]
        logger.debug("Created default columns for board %s", board_id)
        return cls(repository, board_id, columns)

    @classmethod
    def load(cls, repository: Repository, board_id: int) -> "ColumnSet":
        columns = [Column.load(repository, record) for record in repository.list_columns(board_id)]
        column_set = cls(repository, board_id, columns)
        # Heal gaps left by an interrupted structural change
        column_set._renumber()
        logger.debug("Loaded %s column(s) for board %s", len(columns), board_id)
        return column_set

    # --- Reads ---

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(list(self._columns))

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    @property
    def backlog(self) -> Column:
        return self._columns[BACKLOG_ORDINAL]

    @property
    def done_ordinal(self) -> int:
        return len(self._columns) - 1

    def get_column(self, ordinal: int) -> Column:
        """
        Raises:
            ColumnNotFoundError: If ordinal is outside [0, count)
        """
        if ordinal < 0 or ordinal >= len(self._columns):
            logger.error("Column %s does not exist on board %s", ordinal, self.board_id)
            raise ColumnNotFoundError(ordinal)
        return self._columns[ordinal]

    def get_assignee_tasks(self, email: str) -> List[Task]:
        """Tasks of `email` in the in-progress columns (neither backlog nor done)."""
        tasks = []
        for column in self._columns[1:-1]:
            tasks.extend(column.get_assignee_tasks(email))
        return tasks

    def find_task(self, task_id: int) -> Optional[Tuple[Column, Task]]:
        for column in self._columns:
            if task_id in column:
                return column, column.get_task(task_id)
        return None

    # --- Structural changes ---

    def add_column(self, ordinal: int, name: str) -> Column:
        """
        Insert a new empty column at `ordinal`, shifting later columns right.

        Raises:
            InvalidArgumentError: If ordinal is outside [0, count] or name is empty
        """
        if ordinal < 0 or ordinal > len(self._columns):
            logger.error("Cannot add column at ordinal %s on board %s", ordinal, self.board_id)
            raise InvalidArgumentError(f"New column ordinal must be between 0 and {len(self._columns)}")
        if not name:
            logger.error("Tried to add a column with an empty name")
            raise InvalidArgumentError("Column name must not be empty")

        column = Column.create(self._repository, self.board_id, ordinal, name)
        self._columns.insert(ordinal, column)
        self._renumber()
        logger.debug("Inserted column '%s' at %s", name, ordinal)
        return column

    def rename_column(self, ordinal: int, name: str) -> None:
        self.get_column(ordinal).rename(name)

    def move_column(self, ordinal: int, shift: int) -> None:
        """
        Move an empty column by `shift` positions.

        Raises:
            InvalidArgumentError: If shift is 0, the target is out of bounds,
                or the column holds tasks
            ColumnNotFoundError: If ordinal does not exist
        """
        if shift == 0:
            logger.error("Tried to move column %s by 0", ordinal)
            raise InvalidArgumentError("Shift amount must not be 0")
        new_ordinal = ordinal + shift
        if new_ordinal < 0 or new_ordinal >= len(self._columns):
            logger.error("Tried to move column %s out of bounds to %s", ordinal, new_ordinal)
            raise InvalidArgumentError("Shift must keep the column within bounds")
        column = self.get_column(ordinal)
        if column.count != 0:
            logger.error("Tried to move non-empty column '%s'", column.name)
            raise InvalidArgumentError("Only empty columns can be moved")

        self._columns.pop(ordinal)
        self._columns.insert(new_ordinal, column)
        self._renumber()
        logger.debug("Moved column '%s' from %s to %s", column.name, ordinal, new_ordinal)

    def remove_column(self, ordinal: int) -> None:
        """
        Remove a column after merging its tasks into a neighbour.

        The backlog merges forward into ordinal 1, any other column merges
        backward into the previous one.

        Raises:
            InvalidArgumentError: If only MIN_COLUMN_COUNT columns remain
            ColumnNotFoundError: If ordinal does not exist
            LimitReachedError: If the neighbour cannot hold the tasks
        """
        if len(self._columns) <= MIN_COLUMN_COUNT:
            logger.error("Tried to remove a column when only %s remain", len(self._columns))
            raise InvalidArgumentError(f"A board must keep at least {MIN_COLUMN_COUNT} columns")

        column = self.get_column(ordinal)
        if ordinal == BACKLOG_ORDINAL:
            target = self.get_column(ordinal + 1)
        else:
            target = self.get_column(ordinal - 1)
        target.consume_column(column)

        self._columns.pop(ordinal)
        column.remove()
        self._renumber()
        logger.debug("Removed column '%s' into '%s'", column.name, target.name)

    def remove_all(self) -> None:
        """Delete every column and task of the board."""
        for column in self._columns:
            column.remove()
        self._columns.clear()
        logger.debug("Removed all columns of board %s", self.board_id)

    def _renumber(self) -> None:
        # Full re-index pass; n is small
        for ordinal, column in enumerate(self._columns):
            column.ordinal = ordinal
