"""
FILE: kanban/core/registry.py
PURPOSE: Process-wide board collection with cross-board authorization
EXPORTS:
  - BoardRegistry (class)
DEPENDENCIES:
  - logging, typing (stdlib)
  - kanban.core.board (Board)
  - kanban.core.repository (Repository)
  - kanban.core.exceptions
NOTES:
  - Boards are keyed by (creator_email, name)
  - Login state comes from an injected predicate, usually
    UserRegistry.is_user_logged
  - Access to a board needs membership (or creatorship) AND a live login
"""

import logging
from typing import Callable, Dict, List, Tuple

from .board import Board
from .column import Column
from .exceptions import (
    AlreadyExistsError,
    BoardNotFoundError,
    InvalidArgumentError,
    TaskNotFoundError,
    UnauthorizedError,
)
from .repository import Repository
from .task import Task

logger = logging.getLogger(__name__)

BoardKey = Tuple[str, str]


class BoardRegistry:
    """All boards of the process."""

    def __init__(self, repository: Repository, is_user_logged: Callable[[str], bool]):
        self._repository = repository
        self._is_user_logged = is_user_logged
        self._boards: Dict[BoardKey, Board] = {}

    def load(self) -> None:
        """Rebuild every board, its columns, tasks and members from storage."""
        self.clear()
        for record in self._repository.list_boards():
            board = Board.load(self._repository, record)
            self._boards[(board.creator_email, board.name)] = board
        logger.debug("Loaded %s board(s)", len(self._boards))

    def clear(self) -> None:
        self._boards.clear()

    def _verify_logged_in(self, email: str, action: str) -> None:
        if not self._is_user_logged(email):
            logger.error("%s is not logged in and cannot %s", email, action)
            raise UnauthorizedError(f"Only a logged in user can {action}")

    def _find(self, creator_email: str, name: str) -> Board:
        board = self._boards.get((creator_email, name))
        if board is None:
            logger.error("No board '%s' by %s", name, creator_email)
            raise BoardNotFoundError(creator_email, name)
        return board

    # --- Board lifecycle ---

    def add_board(self, creator_email: str, name: str) -> Board:
        """
        Create a board and make its creator the first member.

        Raises:
            UnauthorizedError: If the creator is not logged in
            InvalidArgumentError: If the name is empty
            AlreadyExistsError: If the creator already has a board with this name
        """
        self._verify_logged_in(creator_email, "create a board")
        if not name:
            logger.error("Tried to create a board with an empty name")
            raise InvalidArgumentError("Board name must not be empty")
        if (creator_email, name) in self._boards:
            logger.error("%s already has a board named '%s'", creator_email, name)
            raise AlreadyExistsError(f"There is already a board named '{name}' by {creator_email}")

        board = Board.create(self._repository, creator_email, name)
        self._boards[(creator_email, name)] = board
        self._join(creator_email, board)
        logger.debug("Added board '%s' for %s", name, creator_email)
        return board

    def get_board(self, user: str, creator_email: str, name: str) -> Board:
        """
        Raises:
            BoardNotFoundError: If no such board
            UnauthorizedError: If `user` is neither creator nor member, or not logged in
        """
        board = self._find(creator_email, name)
        if user != creator_email and not board.is_member(user):
            logger.error("%s is neither creator nor member of '%s'", user, name)
            raise UnauthorizedError("Only the board's creator or members can access the board")
        self._verify_logged_in(user, "access this board")
        return board

    def remove_board(self, user: str, creator_email: str, name: str) -> None:
        """
        Raises:
            UnauthorizedError: If `user` is not the logged in creator
            BoardNotFoundError: If no such board
        """
        if user != creator_email:
            logger.error("%s is not the creator of '%s'", user, name)
            raise UnauthorizedError("Only the board's creator can remove the board")
        self._verify_logged_in(user, "remove this board")

        board = self._find(creator_email, name)
        board.remove()
        del self._boards[(creator_email, name)]
        logger.debug("Removed board '%s' of %s", name, creator_email)

    def join_board(self, user: str, creator_email: str, name: str) -> Board:
        """
        Raises:
            BoardNotFoundError: If no such board
            UnauthorizedError: If `user` is not logged in
            AlreadyExistsError: If `user` is already a member
        """
        return self._join(user, self._find(creator_email, name))

    def _join(self, user: str, board: Board) -> Board:
        self._verify_logged_in(user, "join a board")
        if board.is_member(user):
            logger.error("%s is already a member of '%s'", user, board.name)
            raise AlreadyExistsError(f"{user} is already a member of board '{board.name}'")
        self._repository.create_membership(board.id, user)
        board.join(user)
        return board

    # --- Per-user views ---

    def get_in_progress_tasks(self, user: str) -> List[Task]:
        """Tasks assigned to `user` in the middle columns of every board they belong to."""
        self._verify_logged_in(user, "list in-progress tasks")
        tasks = []
        for board in self._boards.values():
            if board.is_member(user):
                tasks.extend(board.get_in_progress_tasks(user))
        return tasks

    def get_boards(self, user: str) -> List[Board]:
        self._verify_logged_in(user, "list boards")
        return [
            board for board in self._boards.values()
            if board.creator_email == user or board.is_member(user)
        ]

    def get_board_names(self, user: str) -> List[str]:
        return [board.name for board in self.get_boards(user)]

    def _locate_task(self, user: str, task_id: int) -> Tuple[Board, Column, Task]:
        for board in self.get_boards(user):
            found = board.find_task(task_id)
            if found is not None:
                column, task = found
                return board, column, task
        logger.error("Task %s not on any board of %s", task_id, user)
        raise TaskNotFoundError(task_id)

    def get_task_board(self, user: str, task_id: int) -> Board:
        return self._locate_task(user, task_id)[0]

    def get_task_column(self, user: str, task_id: int) -> Column:
        return self._locate_task(user, task_id)[1]
