"""
Tests for the Task domain object: field validation and write-through setters.
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import ALICE, due_in, stored_task
from kanban.core.column import Column
from kanban.core.exceptions import ValidationError
from kanban.core.task import Task


@pytest.fixture
def column(repo, board_id):
    return Column.create(repo, board_id, 0, "backlog")


def make_task(repo, column, title="Write tests", description=None, due=None):
    return Task.create(repo, column.id, title, description, ALICE, due or due_in())


def test_create_task(repo, column):
    """A valid task is persisted with an id and creation time."""
    task = make_task(repo, column, description="All of them")

    assert task.id is not None
    assert task.title == "Write tests"
    assert task.description == "All of them"
    assert task.assignee == ALICE
    assert task.column_id == column.id
    assert task.created <= datetime.now()

    record = stored_task(repo, task.id)
    assert record.title == "Write tests"
    print(f"✓ Created task {task.id}")


def test_title_bounds(repo, column):
    """Titles of 1 to 50 characters succeed, empty or 51 fail."""
    assert make_task(repo, column, title="x").title == "x"
    assert make_task(repo, column, title="x" * 50).title == "x" * 50

    with pytest.raises(ValidationError):
        make_task(repo, column, title="")
    with pytest.raises(ValidationError):
        make_task(repo, column, title="x" * 51)

    print("✓ Title bounds enforced")


def test_description_bounds(repo, column):
    """Descriptions may be missing, empty or up to 300 characters."""
    assert make_task(repo, column, description=None).description is None
    assert make_task(repo, column, description="").description == ""
    assert make_task(repo, column, description="d" * 300).description == "d" * 300

    with pytest.raises(ValidationError):
        make_task(repo, column, description="d" * 301)

    print("✓ Description bounds enforced")


def test_due_date_required_and_future(repo, column):
    with pytest.raises(ValidationError):
        make_task(repo, column, due=datetime.now() - timedelta(minutes=1))
    with pytest.raises(ValidationError):
        Task.create(repo, column.id, "No due", None, ALICE, None)

    assert repo.list_tasks(column.id) == []
    print("✓ Past or missing due dates rejected, nothing persisted")


def test_offset_due_date_stored_as_local_time(repo, column):
    """Due dates carrying a UTC offset are accepted and kept naive."""
    aware = datetime.now(timezone.utc) + timedelta(days=1)

    task = make_task(repo, column, due=aware)

    assert task.due.tzinfo is None
    assert task.due == aware.astimezone().replace(tzinfo=None)
    assert stored_task(repo, task.id).due == task.due.isoformat()

    later = datetime.now(timezone(timedelta(hours=-5))) + timedelta(days=2)
    task.set_due(later)
    assert task.due.tzinfo is None

    with pytest.raises(ValidationError):
        task.set_due(datetime.now(timezone.utc) - timedelta(hours=1))
    print("✓ Offset due dates normalized")


def test_past_due_keeps_previous_value(repo, column):
    """A rejected due date leaves the previous one in memory and storage."""
    original = due_in(3)
    task = make_task(repo, column, due=original)

    with pytest.raises(ValidationError):
        task.set_due(datetime.now() - timedelta(days=1))

    assert task.due == original
    assert stored_task(repo, task.id).due == original.isoformat()
    print("✓ Due date untouched after rejection")


def test_setters_write_through(repo, column):
    task = make_task(repo, column)

    task.set_title("Renamed")
    task.set_description("Longer story")
    later = due_in(10)
    task.set_due(later)
    task.set_assignee("bob@example.com")

    record = stored_task(repo, task.id)
    assert record.title == "Renamed"
    assert record.description == "Longer story"
    assert record.due == later.isoformat()
    assert record.assignee == "bob@example.com"
    print("✓ Setters persist every field")


def test_invalid_title_keeps_state(repo, column):
    task = make_task(repo, column)

    with pytest.raises(ValidationError):
        task.set_title("")
    with pytest.raises(ValidationError):
        task.set_assignee("")

    assert task.title == "Write tests"
    assert task.assignee == ALICE
    assert stored_task(repo, task.id).title == "Write tests"


def test_loaded_task_not_revalidated(repo, column):
    """Tasks coming back from storage may have due dates in the past."""
    past = datetime.now() - timedelta(days=30)
    created = repo.create_task(column.id, "Old task", None, ALICE, past)

    task = Task.from_record(repo, stored_task(repo, created.id))

    assert task.due == past
    assert task.title == "Old task"


def test_to_view(repo, column):
    task = make_task(repo, column, description="desc")
    view = task.to_view()

    assert view.id == task.id
    assert view.title == task.title
    assert view.description == "desc"
    assert view.assignee == ALICE
    assert view.due == task.due
    assert view.to_dict()["due"] == task.due.isoformat()
