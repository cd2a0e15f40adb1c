"""
Tests for Column: WIP limits, task membership, merging and renaming.
"""

import pytest

from conftest import ALICE, due_in, stored_task
from kanban.core.column import Column
from kanban.core.exceptions import (
    InvalidArgumentError,
    LimitReachedError,
    NotFoundError,
    TaskNotFoundError,
)
from kanban.core.task import Task


@pytest.fixture
def column(repo, board_id):
    return Column.create(repo, board_id, 0, "backlog")


@pytest.fixture
def other(repo, board_id):
    return Column.create(repo, board_id, 1, "in progress")


def new_task(repo, column, title="Task"):
    """A persisted task pointing at `column` but not yet added to it."""
    return Task.create(repo, column.id, title, None, ALICE, due_in())


def test_new_column_is_unlimited_and_empty(column):
    assert column.limit is None
    assert column.count == 0
    assert len(column) == 0
    assert column.has_room()
    assert column.to_view().task_count == 0


def test_add_get_remove_round_trip(repo, column):
    task = column.add_task(new_task(repo, column))

    assert task.id in column
    assert column.get_task(task.id) is task
    assert column.count == 1

    removed = column.remove_task(task.id)
    assert removed is task
    assert column.count == 0

    with pytest.raises(NotFoundError):
        column.get_task(task.id)
    with pytest.raises(TaskNotFoundError):
        column.remove_task(task.id)

    print("✓ Add/get/remove round trip")


def test_limit_blocks_extra_task(repo, column):
    """With limit N the (N+1)th add fails and the count stays N."""
    column.set_limit(2)
    column.add_task(new_task(repo, column, "one"))
    column.add_task(new_task(repo, column, "two"))

    with pytest.raises(LimitReachedError):
        column.add_task(new_task(repo, column, "three"))

    assert column.count == 2
    assert not column.has_room()
    print("✓ WIP limit enforced")


def test_add_task_rejects_none_and_duplicates(repo, column):
    with pytest.raises(InvalidArgumentError):
        column.add_task(None)

    task = column.add_task(new_task(repo, column))
    with pytest.raises(InvalidArgumentError):
        column.add_task(task)
    assert column.count == 1


def test_full_column_reports_limit_before_duplicate(repo, column):
    task = column.add_task(new_task(repo, column))
    column.set_limit(1)

    with pytest.raises(LimitReachedError):
        column.add_task(task)


def test_add_task_moves_task_to_column(repo, column, other):
    task = new_task(repo, column)

    other.add_task(task)

    assert task.column_id == other.id
    assert stored_task(repo, task.id).column_id == other.id


def test_set_limit_validation(repo, column):
    with pytest.raises(InvalidArgumentError):
        column.set_limit(0)
    with pytest.raises(InvalidArgumentError):
        column.set_limit(-3)

    column.add_task(new_task(repo, column, "one"))
    column.add_task(new_task(repo, column, "two"))
    with pytest.raises(InvalidArgumentError):
        column.set_limit(1)

    assert column.limit is None
    column.set_limit(2)
    assert column.limit == 2


def test_remove_limit(repo, board_id, column):
    column.set_limit(5)
    column.remove_limit()
    assert column.limit is None

    # Second call on an unlimited column changes nothing
    column.remove_limit()
    assert column.limit is None

    reloaded = Column.load(repo, repo.list_columns(board_id)[0])
    assert reloaded.limit is None
    print("✓ remove_limit is a no-op when unlimited")


def test_limit_persists(repo, board_id, column):
    column.set_limit(3)

    reloaded = Column.load(repo, repo.list_columns(board_id)[0])
    assert reloaded.limit == 3


def test_consume_column(repo, column, other):
    column.add_task(new_task(repo, column, "one"))
    column.add_task(new_task(repo, column, "two"))
    other.add_task(new_task(repo, other, "three"))

    other.consume_column(column)

    assert other.count == 3
    assert column.count == 0
    assert all(task.column_id == other.id for task in other)
    assert len(repo.list_tasks(other.id)) == 3


def test_consume_column_over_limit_moves_nothing(repo, column, other):
    column.add_task(new_task(repo, column, "one"))
    column.add_task(new_task(repo, column, "two"))
    other.add_task(new_task(repo, other, "three"))
    other.set_limit(2)

    with pytest.raises(LimitReachedError):
        other.consume_column(column)

    assert column.count == 2
    assert other.count == 1


def test_get_assignee_tasks(repo, column):
    mine = column.add_task(new_task(repo, column, "mine"))
    theirs = column.add_task(Task.create(repo, column.id, "theirs", None, "bob@example.com", due_in()))

    assert column.get_assignee_tasks(ALICE) == [mine]
    assert column.get_assignee_tasks("bob@example.com") == [theirs]
    assert column.get_assignee_tasks("nobody@example.com") == []


def test_rename(repo, board_id, column):
    column.rename("todo")
    assert column.name == "todo"
    assert repo.list_columns(board_id)[0].name == "todo"

    with pytest.raises(InvalidArgumentError):
        column.rename("")
    assert column.name == "todo"


def test_remove_deletes_tasks(repo, board_id, column):
    column.add_task(new_task(repo, column))

    column.remove()

    assert repo.list_tasks(column.id) == []
    assert repo.list_columns(board_id) == []


def test_load_restores_tasks(repo, board_id, column):
    task = column.add_task(new_task(repo, column))

    reloaded = Column.load(repo, repo.list_columns(board_id)[0])

    assert task.id in reloaded
    assert reloaded.get_task(task.id).title == task.title
