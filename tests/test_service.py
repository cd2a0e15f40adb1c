"""
Tests for the KanbanService facade: Response values, error kinds and views.
"""

import json
from datetime import datetime, timedelta, timezone

from conftest import ALICE, BOB, PASSWORD, due_in
from kanban.core.exceptions import ErrorKind
from kanban.core.models import BoardView, ColumnView, TaskView
from kanban.core.service import KanbanService, Response
from kanban.core.users import Session


def test_response_helpers():
    ok = Response.from_value(3)
    assert ok.success
    assert ok.value == 3
    assert ok.error_kind is None

    data = json.loads(ok.to_json())
    assert data == {"success": True, "error_message": None, "error_kind": None, "value": 3}


def test_register_errors_carry_kind(service):
    response = service.register("bad", PASSWORD)

    assert not response.success
    assert response.error_kind == ErrorKind.VALIDATION
    assert "Email" in response.error_message

    assert service.register(ALICE, PASSWORD).success
    assert service.register(ALICE, PASSWORD).error_kind == ErrorKind.ALREADY_EXISTS


def test_validate_password(service):
    assert service.validate_password(PASSWORD, PASSWORD).success
    response = service.validate_password(PASSWORD, "Secret999")
    assert response.error_kind == ErrorKind.VALIDATION


def test_login_resume_logout(service):
    service.register(ALICE, PASSWORD)

    assert service.login("ghost@example.com", PASSWORD).error_kind == ErrorKind.NOT_FOUND
    assert service.login(ALICE, "Wrong123").error_kind == ErrorKind.UNAUTHORIZED

    session = service.login(ALICE, PASSWORD).value
    assert isinstance(session, Session)
    assert service.resume(session.token).value == session
    assert json.loads(service.resume(session.token).to_json())["value"] == {"email": ALICE}

    assert service.logout(session).success
    assert service.resume(session.token).error_kind == ErrorKind.UNAUTHORIZED
    assert service.add_board(session, "Sprint").error_kind == ErrorKind.UNAUTHORIZED


def test_boards(service, sessions):
    alice, bob = sessions[ALICE], sessions[BOB]

    board = service.add_board(alice, "Sprint").value
    assert isinstance(board, BoardView)
    assert board.done_ordinal == 2

    assert service.get_columns(bob, ALICE, "Sprint").error_kind == ErrorKind.UNAUTHORIZED
    assert service.join_board(bob, ALICE, "Sprint").value.name == "Sprint"
    assert service.join_board(bob, ALICE, "Sprint").error_kind == ErrorKind.ALREADY_EXISTS
    assert service.get_board_names(bob).value == ["Sprint"]
    assert [b.name for b in service.get_boards(alice).value] == ["Sprint"]

    assert service.remove_board(bob, ALICE, "Sprint").error_kind == ErrorKind.UNAUTHORIZED
    assert service.remove_board(alice, ALICE, "Sprint").success
    assert service.get_board_names(alice).value == []
    assert service.get_columns(alice, ALICE, "Sprint").error_kind == ErrorKind.NOT_FOUND


def test_task_flow(service, sessions):
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")

    task = service.add_task(alice, ALICE, "Sprint", "Write docs", None, due_in()).value
    assert isinstance(task, TaskView)
    assert task.assignee == ALICE

    assert service.update_task_title(alice, ALICE, "Sprint", 0, task.id, "Write more docs").value.title == "Write more docs"
    assert service.update_task_description(alice, ALICE, "Sprint", 0, task.id, "README").value.description == "README"
    later = due_in(5)
    assert service.update_task_due_date(alice, ALICE, "Sprint", 0, task.id, later).value.due == later

    past = service.update_task_due_date(alice, ALICE, "Sprint", 0, task.id, datetime.now() - timedelta(days=1))
    assert past.error_kind == ErrorKind.VALIDATION

    assert service.advance_task(alice, ALICE, "Sprint", 0, task.id).success
    assert [t.id for t in service.in_progress_tasks(alice).value] == [task.id]
    assert service.get_task_column(alice, task.id).value.ordinal == 1
    assert service.get_task_board(alice, task.id).value.name == "Sprint"

    assert service.advance_task(alice, ALICE, "Sprint", 1, task.id).success
    done = service.advance_task(alice, ALICE, "Sprint", 2, task.id)
    assert done.error_kind == ErrorKind.INVALID_STATE
    assert service.in_progress_tasks(alice).value == []


def test_offset_due_date(service, sessions):
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")
    aware = datetime.now(timezone(timedelta(hours=2))) + timedelta(days=1)

    response = service.add_task(alice, ALICE, "Sprint", "Offset", None, aware)

    assert response.success
    assert response.value.due.tzinfo is None
    assert response.value.due == aware.astimezone().replace(tzinfo=None)

    past = service.update_task_due_date(
        alice, ALICE, "Sprint", 0, response.value.id, datetime.now(timezone.utc) - timedelta(days=1)
    )
    assert past.error_kind == ErrorKind.VALIDATION


def test_session_acts_as_token_owner(service, sessions):
    """The email on a Session is ignored; the token decides who is acting."""
    alice, bob = sessions[ALICE], sessions[BOB]
    service.add_board(alice, "Sprint")
    service.join_board(bob, ALICE, "Sprint")
    theirs = service.add_task(bob, ALICE, "Sprint", "Bob's task", None, due_in()).value
    forged = Session(token=alice.token, email=BOB)

    mine = service.add_task(forged, ALICE, "Sprint", "Alice's task", None, due_in()).value
    assert mine.assignee == ALICE

    response = service.update_task_title(forged, ALICE, "Sprint", 0, theirs.id, "Hijacked")
    assert response.error_kind == ErrorKind.UNAUTHORIZED
    assert service.advance_task(forged, ALICE, "Sprint", 0, theirs.id).error_kind == ErrorKind.UNAUTHORIZED
    assert [t.title for t in service.get_column(bob, ALICE, "Sprint", 0).value] == ["Bob's task", "Alice's task"]

    assert service.logout(forged).success
    assert service.resume(alice.token).error_kind == ErrorKind.UNAUTHORIZED
    assert service.resume(bob.token).success


def test_assign_task(service, sessions):
    alice, bob = sessions[ALICE], sessions[BOB]
    service.add_board(alice, "Sprint")
    task = service.add_task(alice, ALICE, "Sprint", "Pair up", None, due_in()).value

    response = service.assign_task(alice, ALICE, "Sprint", 0, task.id, BOB)
    assert response.error_kind == ErrorKind.UNAUTHORIZED

    service.join_board(bob, ALICE, "Sprint")
    assert service.assign_task(alice, ALICE, "Sprint", 0, task.id, BOB).value.assignee == BOB
    assert service.advance_task(alice, ALICE, "Sprint", 0, task.id).error_kind == ErrorKind.UNAUTHORIZED
    assert service.advance_task(bob, ALICE, "Sprint", 0, task.id).success


def test_columns(service, sessions):
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")

    assert service.get_column_limit(alice, ALICE, "Sprint", 1).value is None
    assert service.limit_column(alice, ALICE, "Sprint", 1, 2).success
    assert service.get_column_limit(alice, ALICE, "Sprint", 1).value == 2
    assert service.limit_column(alice, ALICE, "Sprint", 1, 0).error_kind == ErrorKind.INVALID_ARGUMENT
    assert service.remove_column_limit(alice, ALICE, "Sprint", 1).success
    assert service.get_column_limit(alice, ALICE, "Sprint", 1).value is None

    column = service.add_column(alice, ALICE, "Sprint", 2, "review").value
    assert isinstance(column, ColumnView)
    assert column.ordinal == 2
    assert service.rename_column(alice, ALICE, "Sprint", 2, "qa").success
    assert service.get_column_name(alice, ALICE, "Sprint", 2).value == "qa"
    assert service.move_column(alice, ALICE, "Sprint", 2, 0).error_kind == ErrorKind.INVALID_ARGUMENT
    assert service.move_column(alice, ALICE, "Sprint", 2, -1).success
    assert [c.name for c in service.get_columns(alice, ALICE, "Sprint").value] == [
        "backlog", "qa", "in progress", "done",
    ]
    assert service.get_column_name(alice, ALICE, "Sprint", 9).error_kind == ErrorKind.NOT_FOUND


def test_limit_reached_kind(service, sessions):
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")
    service.limit_column(alice, ALICE, "Sprint", 0, 1)
    service.add_task(alice, ALICE, "Sprint", "One", None, due_in())

    response = service.add_task(alice, ALICE, "Sprint", "Two", None, due_in())

    assert response.error_kind == ErrorKind.LIMIT_REACHED
    assert len(service.get_column(alice, ALICE, "Sprint", 0).value) == 1


def test_remove_column_merges(service, sessions):
    """Removing the backlog with 2 tasks next to 1 in-progress task leaves 3 in progress."""
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")
    ids = [
        service.add_task(alice, ALICE, "Sprint", f"Task {i}", None, due_in()).value.id
        for i in range(3)
    ]
    service.advance_task(alice, ALICE, "Sprint", 0, ids[0])

    assert service.remove_column(alice, ALICE, "Sprint", 0).success

    columns = service.get_columns(alice, ALICE, "Sprint").value
    assert [(c.ordinal, c.name, c.task_count) for c in columns] == [
        (0, "in progress", 3),
        (1, "done", 0),
    ]
    assert service.remove_column(alice, ALICE, "Sprint", 0).error_kind == ErrorKind.INVALID_ARGUMENT


def test_reload_from_storage(repo, service, sessions):
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")
    task = service.add_task(alice, ALICE, "Sprint", "Persisted", None, due_in()).value

    fresh = KanbanService(repo)
    assert fresh.load_data().success

    tasks = fresh.get_column(alice, ALICE, "Sprint", 0).value
    assert [t.id for t in tasks] == [task.id]


def test_delete_data(repo, service, sessions):
    alice = sessions[ALICE]
    service.add_board(alice, "Sprint")

    assert service.delete_data().success

    assert service.resume(alice.token).error_kind == ErrorKind.UNAUTHORIZED
    assert service.login(ALICE, PASSWORD).error_kind == ErrorKind.NOT_FOUND
    assert repo.list_boards() == []
