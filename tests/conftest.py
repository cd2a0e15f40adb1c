"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from kanban.core.models import TaskRecord  # noqa: E402
from kanban.core.registry import BoardRegistry  # noqa: E402
from kanban.core.repository import Repository  # noqa: E402
from kanban.core.service import KanbanService  # noqa: E402
from kanban.core.users import UserRegistry  # noqa: E402

PASSWORD = "Secret123"
ALICE = "alice@example.com"
BOB = "bob@example.com"


def due_in(days: int = 1) -> datetime:
    """A due date safely in the future."""
    return datetime.now() + timedelta(days=days)


def stored_task(repo, task_id):
    """The persisted row of a task, or None."""
    rows = repo.get_connection().execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchall()
    return TaskRecord.from_row(rows[0]) if rows else None


def stored_user(repo, email):
    return next((user for user in repo.list_users() if user.email == email), None)


def stored_session(repo, token):
    return next((session for session in repo.list_sessions() if session.token == token), None)


@pytest.fixture
def repo():
    """In-memory database, fresh for every test."""
    repository = Repository(":memory:")
    yield repository
    repository.close()


@pytest.fixture
def users(repo):
    return UserRegistry(repo)


@pytest.fixture
def registry(repo, users):
    return BoardRegistry(repo, users.is_user_logged)


@pytest.fixture
def alice(users):
    """Alice, registered and logged in."""
    users.register(ALICE, PASSWORD)
    return users.login(ALICE, PASSWORD)


@pytest.fixture
def bob(users):
    """Bob, registered and logged in."""
    users.register(BOB, PASSWORD)
    return users.login(BOB, PASSWORD)


@pytest.fixture
def service(repo):
    kanban = KanbanService(repo)
    assert kanban.load_data().success
    return kanban


@pytest.fixture
def sessions(service):
    """Logged in sessions for alice and bob, keyed by email."""
    result = {}
    for email in (ALICE, BOB):
        assert service.register(email, PASSWORD).success
        result[email] = service.login(email, PASSWORD).value
    return result


@pytest.fixture
def board_id(repo):
    """Id of a bare board row, for column and task tests."""
    return repo.create_board(ALICE, "Scratch").id
