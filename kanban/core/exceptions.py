"""
FILE: kanban/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - ErrorKind (enum carried across the service boundary)
  - KanbanError (base exception)
  - ValidationError, InvalidArgumentError, UnauthorizedError,
    LimitReachedError, AlreadyExistsError, InvalidStateError, RepositoryError
  - NotFoundError and its TaskNotFoundError, ColumnNotFoundError,
    BoardNotFoundError, UserNotFoundError subclasses
DEPENDENCIES:
  - enum (stdlib)
NOTES:
  - All exceptions inherit from KanbanError for easy catching
  - Every class carries a `kind` so callers can branch without isinstance chains
  - Core raises these, the service facade catches and wraps them in a Response
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failure, preserved when errors cross the facade."""

    VALIDATION = "validation"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    LIMIT_REACHED = "limit_reached"
    ALREADY_EXISTS = "already_exists"
    INVALID_STATE = "invalid_state"
    PERSISTENCE = "persistence"


class KanbanError(Exception):
    """Base exception for all Kanban errors."""

    kind = ErrorKind.INVALID_ARGUMENT


class ValidationError(KanbanError):
    """A field value (title, description, due date, email, password) is invalid."""

    kind = ErrorKind.VALIDATION


class InvalidArgumentError(KanbanError):
    """A call parameter is invalid (out-of-range ordinal, empty name, null task)."""

    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(KanbanError):
    """Referenced entity doesn't exist."""

    kind = ErrorKind.NOT_FOUND


class TaskNotFoundError(NotFoundError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class ColumnNotFoundError(NotFoundError):
    """Column with given ordinal doesn't exist."""

    def __init__(self, ordinal: int):
        self.ordinal = ordinal
        super().__init__(f"Column {ordinal} not found")


class BoardNotFoundError(NotFoundError):
    """No board with the given creator and name."""

    def __init__(self, creator_email: str, board_name: str):
        self.creator_email = creator_email
        self.board_name = board_name
        super().__init__(f"Board '{board_name}' by {creator_email} not found")


class UserNotFoundError(NotFoundError):
    """No registered user with the given email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User {email} not found")


class UnauthorizedError(KanbanError):
    """Caller lacks the required login, membership or assignee role."""

    kind = ErrorKind.UNAUTHORIZED


class LimitReachedError(KanbanError):
    """Column WIP limit would be exceeded."""

    kind = ErrorKind.LIMIT_REACHED


class AlreadyExistsError(KanbanError):
    """Duplicate board, membership, user or session."""

    kind = ErrorKind.ALREADY_EXISTS


class InvalidStateError(KanbanError):
    """Operation not allowed in the task's current column (e.g. done)."""

    kind = ErrorKind.INVALID_STATE


class RepositoryError(KanbanError):
    """Persistence call failed or affected no rows."""

    kind = ErrorKind.PERSISTENCE
