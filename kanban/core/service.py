"""
FILE: kanban/core/service.py
PURPOSE: Service facade wrapping every core operation in a uniform Response
EXPORTS:
  - Response (dataclass)
  - KanbanService (class)
    - load_data() / delete_data()
    - register / validate_password / login / resume / logout
    - add_board / join_board / remove_board / get_board_names / get_boards
    - in_progress_tasks
    - add_task / update_task_due_date / update_task_title /
      update_task_description / advance_task / assign_task
    - get_column / get_column_name / get_column_limit / limit_column /
      remove_column_limit / add_column / rename_column / move_column /
      remove_column / get_columns
    - get_task_board / get_task_column
DEPENDENCIES:
  - kanban.core.users (UserRegistry, Session)
  - kanban.core.registry (BoardRegistry)
  - kanban.core.repository (Repository)
  - kanban.core.exceptions (KanbanError, ErrorKind)
NOTES:
  - The only place KanbanError is caught; nothing raises past the facade
  - Errors keep their ErrorKind next to the message
  - Domain objects never leave: tasks, columns and boards cross as views
  - Board-scoped calls act as the user the session token resolves to,
    never the email carried on the Session object
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .exceptions import ErrorKind, KanbanError
from .registry import BoardRegistry
from .repository import Repository
from .users import Session, UserRegistry

logger = logging.getLogger(__name__)


@dataclass
class Response:
    """Outcome of a facade call: a value, or an error message and kind."""

    value: Any = None
    error_message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error_message is None

    @classmethod
    def from_value(cls, value: Any = None) -> "Response":
        return cls(value=value)

    @classmethod
    def from_error(cls, error: KanbanError) -> "Response":
        return cls(error_message=str(error), error_kind=error.kind)

    def to_json(self) -> str:
        """Serialize response to JSON string."""
        value = self.value
        if isinstance(value, list):
            value = [_plain(item) for item in value]
        else:
            value = _plain(value)
        return json.dumps(
            {
                "success": self.success,
                "error_message": self.error_message,
                "error_kind": self.error_kind.value if self.error_kind else None,
                "value": value,
            },
            indent=2,
        )


def _plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Session):
        return {"email": value.email}
    return value


class KanbanService:
    """Entry point for every front end."""

    def __init__(self, repository: Repository):
        self._repository = repository
        self.users = UserRegistry(repository)
        self.boards = BoardRegistry(repository, self.users.is_user_logged)

    def _respond(self, operation: Callable[[], Any]) -> Response:
        try:
            return Response.from_value(operation())
        except KanbanError as e:
            logger.debug("Operation failed (%s): %s", e.kind.value, e)
            return Response.from_error(e)

    def _acting_user(self, session: Session) -> str:
        return self.users.resume(session.token).email

    def _board(self, user: str, creator_email: str, board_name: str):
        return self.boards.get_board(user, creator_email, board_name)

    def _session_board(self, session: Session, creator_email: str, board_name: str):
        return self._board(self._acting_user(session), creator_email, board_name)

    # --- Data lifecycle ---

    def load_data(self) -> Response:
        """Load users, sessions and boards from storage. Call once at startup."""
        def load():
            self.users.load()
            self.boards.load()
        return self._respond(load)

    def delete_data(self) -> Response:
        """Remove all persistent data and clear memory."""
        def wipe():
            self._repository.delete_all()
            self.users.clear()
            self.boards.clear()
        return self._respond(wipe)

    # --- Users ---

    def register(self, email: str, password: str) -> Response:
        return self._respond(lambda: self.users.register(email, password))

    def validate_password(self, password: str, confirmation: str) -> Response:
        return self._respond(lambda: self.users.validate_password(password, confirmation))

    def login(self, email: str, password: str) -> Response:
        """Value is the new Session."""
        return self._respond(lambda: self.users.login(email, password))

    def resume(self, token: str) -> Response:
        """Value is the Session for a previously issued token."""
        return self._respond(lambda: self.users.resume(token))

    def logout(self, session: Session) -> Response:
        return self._respond(lambda: self.users.logout(session))

    # --- Boards ---

    def add_board(self, session: Session, board_name: str) -> Response:
        return self._respond(
            lambda: self.boards.add_board(self._acting_user(session), board_name).to_view()
        )

    def join_board(self, session: Session, creator_email: str, board_name: str) -> Response:
        return self._respond(
            lambda: self.boards.join_board(self._acting_user(session), creator_email, board_name).to_view()
        )

    def remove_board(self, session: Session, creator_email: str, board_name: str) -> Response:
        return self._respond(
            lambda: self.boards.remove_board(self._acting_user(session), creator_email, board_name)
        )

    def get_board_names(self, session: Session) -> Response:
        return self._respond(lambda: self.boards.get_board_names(self._acting_user(session)))

    def get_boards(self, session: Session) -> Response:
        return self._respond(
            lambda: [board.to_view() for board in self.boards.get_boards(self._acting_user(session))]
        )

    def in_progress_tasks(self, session: Session) -> Response:
        return self._respond(
            lambda: [task.to_view() for task in self.boards.get_in_progress_tasks(self._acting_user(session))]
        )

    # --- Tasks ---

    def add_task(
        self,
        session: Session,
        creator_email: str,
        board_name: str,
        title: str,
        description: Optional[str],
        due: datetime,
    ) -> Response:
        def add():
            user = self._acting_user(session)
            board = self._board(user, creator_email, board_name)
            return board.add_task(user, title, description, due).to_view()
        return self._respond(add)

    def update_task_due_date(
        self, session: Session, creator_email: str, board_name: str, ordinal: int, task_id: int, due: datetime
    ) -> Response:
        def update():
            user = self._acting_user(session)
            board = self._board(user, creator_email, board_name)
            return board.update_task_due_date(task_id, ordinal, due, user).to_view()
        return self._respond(update)

    def update_task_title(
        self, session: Session, creator_email: str, board_name: str, ordinal: int, task_id: int, title: str
    ) -> Response:
        def update():
            user = self._acting_user(session)
            board = self._board(user, creator_email, board_name)
            return board.update_task_title(task_id, ordinal, title, user).to_view()
        return self._respond(update)

    def update_task_description(
        self, session: Session, creator_email: str, board_name: str, ordinal: int, task_id: int,
        description: Optional[str],
    ) -> Response:
        def update():
            user = self._acting_user(session)
            board = self._board(user, creator_email, board_name)
            return board.update_task_description(task_id, ordinal, description, user).to_view()
        return self._respond(update)

    def advance_task(self, session: Session, creator_email: str, board_name: str, ordinal: int, task_id: int) -> Response:
        def advance():
            user = self._acting_user(session)
            board = self._board(user, creator_email, board_name)
            return board.advance_task(task_id, ordinal, user).to_view()
        return self._respond(advance)

    def assign_task(
        self, session: Session, creator_email: str, board_name: str, ordinal: int, task_id: int, assignee: str
    ) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name)
            .assign_task(task_id, ordinal, assignee).to_view()
        )

    # --- Columns ---

    def get_column(self, session: Session, creator_email: str, board_name: str, ordinal: int) -> Response:
        """Value is the list of tasks in the column."""
        return self._respond(
            lambda: [
                task.to_view()
                for task in self._session_board(session, creator_email, board_name).get_column(ordinal).get_tasks()
            ]
        )

    def get_column_name(self, session: Session, creator_email: str, board_name: str, ordinal: int) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).get_column(ordinal).name
        )

    def get_column_limit(self, session: Session, creator_email: str, board_name: str, ordinal: int) -> Response:
        """Value is the limit, or None for an unlimited column."""
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).get_column(ordinal).limit
        )

    def limit_column(self, session: Session, creator_email: str, board_name: str, ordinal: int, limit: int) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).limit_column(ordinal, limit)
        )

    def remove_column_limit(self, session: Session, creator_email: str, board_name: str, ordinal: int) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).remove_column_limit(ordinal)
        )

    def add_column(self, session: Session, creator_email: str, board_name: str, ordinal: int, name: str) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).add_column(ordinal, name).to_view()
        )

    def rename_column(self, session: Session, creator_email: str, board_name: str, ordinal: int, name: str) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).rename_column(ordinal, name)
        )

    def move_column(self, session: Session, creator_email: str, board_name: str, ordinal: int, shift: int) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).move_column(ordinal, shift)
        )

    def remove_column(self, session: Session, creator_email: str, board_name: str, ordinal: int) -> Response:
        return self._respond(
            lambda: self._session_board(session, creator_email, board_name).remove_column(ordinal)
        )

    def get_columns(self, session: Session, creator_email: str, board_name: str) -> Response:
        return self._respond(
            lambda: [column.to_view() for column in self._session_board(session, creator_email, board_name).columns]
        )

    # --- Task lookup ---

    def get_task_board(self, session: Session, task_id: int) -> Response:
        return self._respond(
            lambda: self.boards.get_task_board(self._acting_user(session), task_id).to_view()
        )

    def get_task_column(self, session: Session, task_id: int) -> Response:
        return self._respond(
            lambda: self.boards.get_task_column(self._acting_user(session), task_id).to_view()
        )
