"""
FILE: kanban/core/task.py
PURPOSE: Task domain object with field validation and write-through persistence
EXPORTS:
  - Task (class)
  - validate_title(title) / validate_description(description) / validate_due(due)
DEPENDENCIES:
  - datetime, logging, typing (stdlib)
  - kanban.core.repository (Repository)
  - kanban.core.models (TaskRecord, TaskView)
  - kanban.core.exceptions (ValidationError)
NOTES:
  - A task only knows the id of its column, never the column object
  - Setters validate first and leave state untouched on failure
  - Aware due dates are stored as naive local time
  - Tasks loaded from storage are not re-validated (old due dates are fine)
"""

import logging
from datetime import datetime
from typing import Optional

from .constants import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from .exceptions import ValidationError
from .models import TaskRecord, TaskView, parse_timestamp, to_local_time
from .repository import Repository

logger = logging.getLogger(__name__)


def validate_title(title: Optional[str]) -> None:
    if not title or len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title should be {TITLE_MAX_LENGTH} characters or shorter, and not empty"
        )


def validate_description(description: Optional[str]) -> None:
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description should be {DESCRIPTION_MAX_LENGTH} characters or shorter"
        )


def validate_due(due: Optional[datetime]) -> None:
    if not isinstance(due, datetime):
        raise ValidationError("Due date is required")
    if to_local_time(due) < datetime.now():
        raise ValidationError("Due date must be now or later")


def validate_assignee(assignee: Optional[str]) -> None:
    if not assignee:
        raise ValidationError("Assignee must not be empty")


class Task:
    """A unit of work sitting in exactly one column."""

    def __init__(self, repository: Repository, record: TaskRecord):
        self._repository = repository
        self._id = record.id
        self._created = parse_timestamp(record.created_at)
        self._column_id = record.column_id
        self._title = record.title
        self._description = record.description
        self._assignee = record.assignee
        self._due = parse_timestamp(record.due)

    @classmethod
    def create(
        cls,
        repository: Repository,
        column_id: int,
        title: str,
        description: Optional[str],
        assignee: str,
        due: datetime,
    ) -> "Task":
        """
        Validate fields and persist a new task.

        Raises:
            ValidationError: If title, description, assignee or due date is invalid
        """
        try:
            validate_title(title)
            validate_description(description)
            validate_assignee(assignee)
            validate_due(due)
        except ValidationError as e:
            logger.error("Rejected new task '%s': %s", title, e)
            raise

        due = to_local_time(due)
        record = repository.create_task(column_id, title, description, assignee, due)
        task = cls(repository, record)
        logger.debug("Task %s created in column %s", task.id, column_id)
        return task

    @classmethod
    def from_record(cls, repository: Repository, record: TaskRecord) -> "Task":
        """Load a persisted task without validating its fields."""
        return cls(repository, record)

    # --- Read-only properties ---

    @property
    def id(self) -> int:
        return self._id

    @property
    def created(self) -> datetime:
        return self._created

    @property
    def column_id(self) -> int:
        return self._column_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def assignee(self) -> str:
        return self._assignee

    @property
    def due(self) -> datetime:
        return self._due

    # --- Mutators ---

    def _set(self, field_name: str, value, validator) -> None:
        try:
            validator(value)
        except ValidationError as e:
            logger.error("Task %s failed to set %s: %s", self._id, field_name, e)
            raise
        self._repository.update_task(self._id, **{field_name: value})
        setattr(self, f"_{field_name}", value)
        logger.debug("Task %s %s set to %r", self._id, field_name, value)

    def set_title(self, title: str) -> None:
        self._set("title", title, validate_title)

    def set_description(self, description: Optional[str]) -> None:
        self._set("description", description, validate_description)

    def set_due(self, due: datetime) -> None:
        self._set("due", to_local_time(due), validate_due)

    def set_assignee(self, assignee: str) -> None:
        self._set("assignee", assignee, validate_assignee)

    def move_column(self, column_id: int) -> None:
        """Point the task at another column. Limit checks belong to the caller."""
        self._repository.update_task(self._id, column_id=column_id)
        self._column_id = column_id
        logger.debug("Task %s moved to column %s", self._id, column_id)

    def remove(self) -> None:
        """Delete the persisted task. The object must not be used afterwards."""
        self._repository.delete_task(self._id)
        logger.debug("Task %s removed", self._id)

    # --- Boundary conversion ---

    def to_view(self) -> TaskView:
        return TaskView(
            id=self._id,
            created=self._created,
            title=self._title,
            description=self._description,
            due=self._due,
            assignee=self._assignee,
        )

    def __repr__(self) -> str:
        return f"Task(id={self._id}, title={self._title!r}, column_id={self._column_id})"
