"""
FILE: kanban/core/board.py
PURPOSE: Board domain object: task lifecycle, column delegation, membership
EXPORTS:
  - Board (class)
DEPENDENCIES:
  - datetime, logging, typing (stdlib)
  - kanban.core.column (Column, ColumnSet)
  - kanban.core.task (Task)
  - kanban.core.repository (Repository)
  - kanban.core.exceptions
NOTES:
  - Tasks always enter through the backlog (ordinal 0)
  - Tasks in the done column are frozen
  - Changing a task requires being its assignee; reassigning only requires
    the new assignee to be a member
  - advance_task checks the next column's room before touching the source
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from .column import Column, ColumnSet
from .constants import BACKLOG_ORDINAL
from .exceptions import (
    InvalidStateError,
    LimitReachedError,
    UnauthorizedError,
)
from .models import BoardRecord, BoardView
from .repository import Repository
from .task import Task

logger = logging.getLogger(__name__)


class Board:
    """A named board owned by its creator, shared with its members."""

    def __init__(
        self,
        repository: Repository,
        record: BoardRecord,
        columns: ColumnSet,
        members: Optional[List[str]] = None,
    ):
        self._repository = repository
        self.id = record.id
        self.creator_email = record.creator_email
        self.name = record.name
        self._columns = columns
        self._members: List[str] = list(members or [])

    @classmethod
    def create(cls, repository: Repository, creator_email: str, name: str) -> "Board":
        """Persist a new board with the default columns. Membership is the caller's job."""
        record = repository.create_board(creator_email, name)
        columns = ColumnSet.create(repository, record.id)
        logger.debug("Created board '%s' for %s", name, creator_email)
        return cls(repository, record, columns)

    @classmethod
    def load(cls, repository: Repository, record: BoardRecord) -> "Board":
        """Rebuild a board, its columns, tasks and members from storage."""
        columns = ColumnSet.load(repository, record.id)
        members = repository.list_memberships(record.id)
        logger.debug("Loaded board '%s' with %s member(s)", record.name, len(members))
        return cls(repository, record, columns, members)

    def __repr__(self) -> str:
        return f"Board(id={self.id}, name={self.name!r}, creator={self.creator_email!r})"

    # --- Columns ---

    @property
    def columns(self) -> List[Column]:
        return self._columns.columns

    @property
    def done_ordinal(self) -> int:
        return self._columns.done_ordinal

    def get_column(self, ordinal: int) -> Column:
        return self._columns.get_column(ordinal)

    def add_column(self, ordinal: int, name: str) -> Column:
        return self._columns.add_column(ordinal, name)

    def rename_column(self, ordinal: int, name: str) -> None:
        self._columns.rename_column(ordinal, name)

    def move_column(self, ordinal: int, shift: int) -> None:
        self._columns.move_column(ordinal, shift)

    def remove_column(self, ordinal: int) -> None:
        self._columns.remove_column(ordinal)

    def limit_column(self, ordinal: int, limit: int) -> None:
        self._columns.get_column(ordinal).set_limit(limit)

    def remove_column_limit(self, ordinal: int) -> None:
        self._columns.get_column(ordinal).remove_limit()

    # --- Membership ---

    @property
    def members(self) -> List[str]:
        return list(self._members)

    def is_member(self, email: str) -> bool:
        return email in self._members

    def join(self, email: str) -> None:
        """Add a member. Duplicate checks belong to the registry."""
        self._members.append(email)
        logger.debug("%s joined board '%s'", email, self.name)

    # --- Gates ---

    def _verify_changeable(self, ordinal: int) -> None:
        done = self._columns.done_ordinal
        if ordinal == done:
            logger.error("Tasks in the done column of '%s' cannot change", self.name)
            raise InvalidStateError("Cannot change a task that is done")
        if ordinal < BACKLOG_ORDINAL or ordinal >= done:
            logger.error("Column ordinal %s outside 0..%s on board '%s'", ordinal, done - 1, self.name)
            raise InvalidStateError(f"A changeable column ordinal is between 0 and {done - 1}")

    def _verify_assignee(self, task: Task, user: str) -> None:
        if task.assignee != user:
            logger.error("%s is not the assignee of task %s", user, task.id)
            raise UnauthorizedError("Only the task's assignee can change the task")

    def _changeable_task(self, task_id: int, ordinal: int, user: str) -> Task:
        self._verify_changeable(ordinal)
        task = self._columns.get_column(ordinal).get_task(task_id)
        self._verify_assignee(task, user)
        return task

    # --- Tasks ---

    def add_task(self, user: str, title: str, description: Optional[str], due: datetime) -> Task:
        """
        Create a task in the backlog, assigned to `user`.

        Raises:
            ValidationError: If title, description or due date is invalid
            LimitReachedError: If the backlog is full
        """
        backlog = self._columns.backlog
        if not backlog.has_room():
            logger.error("Backlog of '%s' is full", self.name)
            raise LimitReachedError(f"Column '{backlog.name}' reached its limit of {backlog.limit}")
        task = Task.create(self._repository, backlog.id, title, description, user, due)
        backlog.add_task(task)
        logger.debug("Added task %s to board '%s'", task.id, self.name)
        return task

    def update_task_title(self, task_id: int, ordinal: int, title: str, user: str) -> Task:
        task = self._changeable_task(task_id, ordinal, user)
        task.set_title(title)
        return task

    def update_task_description(self, task_id: int, ordinal: int, description: Optional[str], user: str) -> Task:
        task = self._changeable_task(task_id, ordinal, user)
        task.set_description(description)
        return task

    def update_task_due_date(self, task_id: int, ordinal: int, due: datetime, user: str) -> Task:
        task = self._changeable_task(task_id, ordinal, user)
        task.set_due(due)
        return task

    def advance_task(self, task_id: int, ordinal: int, user: str) -> Task:
        """
        Move a task from `ordinal` to the next column.

        Raises:
            InvalidStateError: If the task is done or ordinal is out of range
            TaskNotFoundError: If the task is not in that column
            UnauthorizedError: If `user` is not the assignee
            LimitReachedError: If the next column is full (nothing moves)
        """
        task = self._changeable_task(task_id, ordinal, user)
        source = self._columns.get_column(ordinal)
        target = self._columns.get_column(ordinal + 1)
        if not target.has_room():
            logger.error("Cannot advance task %s, column '%s' is full", task_id, target.name)
            raise LimitReachedError(f"Column '{target.name}' reached its limit of {target.limit}")

        source.remove_task(task_id)
        target.add_task(task)
        logger.debug("Advanced task %s to column '%s'", task_id, target.name)
        return task

    def assign_task(self, task_id: int, ordinal: int, new_assignee: str) -> Task:
        """
        Hand a task to another member.

        Raises:
            InvalidStateError: If the task is done or ordinal is out of range
            UnauthorizedError: If `new_assignee` is not a member
            TaskNotFoundError: If the task is not in that column
        """
        self._verify_changeable(ordinal)
        if not self.is_member(new_assignee):
            logger.error("%s is not a member of '%s', cannot be assigned", new_assignee, self.name)
            raise UnauthorizedError("Only board members can be assigned to tasks")
        task = self._columns.get_column(ordinal).get_task(task_id)
        task.set_assignee(new_assignee)
        return task

    def get_in_progress_tasks(self, email: str) -> List[Task]:
        """
        Raises:
            UnauthorizedError: If `email` is not a member
        """
        if not self.is_member(email):
            logger.error("%s is not a member of '%s'", email, self.name)
            raise UnauthorizedError("Only board members have tasks in the board")
        return self._columns.get_assignee_tasks(email)

    def find_task(self, task_id: int) -> Optional[Tuple[Column, Task]]:
        return self._columns.find_task(task_id)

    # --- Lifecycle ---

    def remove(self) -> None:
        """Delete columns, tasks, memberships and the board row."""
        self._columns.remove_all()
        self._repository.delete_memberships(self.id)
        self._repository.delete_board(self.id)
        self._members.clear()
        logger.debug("Removed board '%s'", self.name)

    def to_view(self) -> BoardView:
        return BoardView(
            id=self.id,
            name=self.name,
            creator_email=self.creator_email,
            backlog_ordinal=BACKLOG_ORDINAL,
            done_ordinal=self.done_ordinal,
        )
