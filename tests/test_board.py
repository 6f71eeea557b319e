# tests/test_board.py

from datetime import date

import pytest

from todo_client.api import TaskApiClient, TaskApiError
from todo_client.board import FILL_ALL_FIELDS, TaskBoard
from todo_client.render import DONE, EDIT, NOT_DONE, TaskForm

from .conftest import make_client
from .fakes import FailingStore


def add(board, title="Buy milk", description="2%", due="2024-01-10"):
    assert board.create(TaskForm(title=title, description=description, due_date=due))


def test_create_refreshes_pending_list(board):
    board.form = TaskForm(title="Buy milk", description="2%", due_date="2024-01-10")
    assert board.create()
    assert [v.title for v in board.model.pending] == ["Buy milk"]
    assert board.model.completed == []
    assert board.form == TaskForm()


def test_blank_create_alerts_and_sends_nothing(board, alerts, store):
    assert not board.create(TaskForm(title="  ", description="2%", due_date="2024-01-10"))
    assert alerts == [FILL_ALL_FIELDS]
    assert store.list_tasks() == []


def test_bad_due_date_alerts(board, alerts, store):
    assert not board.create(TaskForm(title="t", description="d", due_date="tomorrow"))
    assert len(alerts) == 1
    assert store.list_tasks() == []


def test_complete_and_uncomplete_move_between_lists(board):
    add(board)
    task_id = board.model.pending[0].id
    assert board.perform(DONE, task_id)
    assert board.model.pending == []
    assert [v.id for v in board.model.completed] == [task_id]
    assert board.perform(NOT_DONE, task_id)
    assert [v.id for v in board.model.pending] == [task_id]


def test_action_not_offered_is_refused(board):
    add(board)
    task_id = board.model.pending[0].id
    assert not board.perform(NOT_DONE, task_id)
    with pytest.raises(ValueError):
        board.perform(EDIT, task_id)


def test_edit_only_pending(board):
    add(board)
    task_id = board.model.pending[0].id
    form = board.begin_edit(task_id)
    assert form.title == "Buy milk" and form.due_date == "2024-01-10"
    form.title = "Buy oat milk"
    assert board.submit_edit(form)
    assert board.model.pending[0].title == "Buy oat milk"

    board.complete(task_id)
    assert board.begin_edit(task_id) is None


def test_delete_from_either_list(board):
    add(board, title="a")
    add(board, title="b")
    first, second = (v.id for v in board.model.pending)
    board.complete(second)
    assert board.delete(second)
    assert board.delete(first)
    assert board.model.pending == [] and board.model.completed == []


def test_sort_selection_refetches(board):
    add(board, title="later", due="2024-03-01")
    add(board, title="sooner", due="2024-01-01")
    assert board.set_sort("dueDate")
    assert [v.title for v in board.model.pending] == ["sooner", "later"]
    with pytest.raises(ValueError):
        board.set_sort("title")


def test_failure_keeps_previous_model(board):
    add(board)
    before = board.model
    assert not board.delete("missing-id")
    assert board.model is before


def test_list_failure_keeps_previous_model():
    with make_client(FailingStore()) as client:
        board = TaskBoard(TaskApiClient(http=client))
        before = board.model
        assert not board.refresh()
        assert board.model is before


def test_api_client_raises_with_status(api):
    with pytest.raises(TaskApiError) as info:
        api.delete_task("missing-id")
    assert info.value.status_code == 404


def test_api_client_round_trip(api):
    task = api.create_task("Buy milk", "2%", date(2024, 1, 10))
    assert task.completed is False
    assert api.complete_task(task.id).completed is True
    assert api.uncomplete_task(task.id).completed is False
    updated = api.update_task(task.id, "Buy bread", "rye", date(2024, 1, 11))
    assert (updated.title, updated.dueDate) == ("Buy bread", date(2024, 1, 11))
    assert [t.id for t in api.list_tasks("dateCreated")] == [task.id]
    assert api.delete_task(task.id).id == task.id
