# tests/test_render.py

from datetime import date, datetime, timezone

from todo_client.models import Task
from todo_client.render import (
    COMPLETED_ACTIONS,
    DONE,
    EDIT,
    NOT_DONE,
    PENDING_ACTIONS,
    TaskForm,
    build_render_model,
    edit_form_for,
)


def make_task(task_id, completed=False, due=date(2024, 1, 10)):
    return Task(
        id=task_id,
        title=f"title {task_id}",
        description=f"desc {task_id}",
        dueDate=due,
        dateCreated=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        completed=completed,
    )


def test_partitions_by_completed_and_keeps_order():
    tasks = [make_task("a"), make_task("b", True), make_task("c"), make_task("d", True)]
    model = build_render_model(tasks)
    assert [v.id for v in model.pending] == ["a", "c"]
    assert [v.id for v in model.completed] == ["b", "d"]


def test_rendering_twice_is_identical():
    tasks = [make_task("a"), make_task("b", True)]
    assert build_render_model(tasks) == build_render_model(tasks)


def test_actions_are_exclusive():
    model = build_render_model([make_task("a"), make_task("b", True)])
    pending, completed = model.pending[0], model.completed[0]
    assert pending.actions == PENDING_ACTIONS
    assert completed.actions == COMPLETED_ACTIONS
    assert DONE in pending.actions and NOT_DONE not in pending.actions
    assert NOT_DONE in completed.actions and DONE not in completed.actions
    assert EDIT not in completed.actions
    assert completed.struck_through and not pending.struck_through


def test_labels_and_edit_form():
    view = build_render_model([make_task("a")]).pending[0]
    assert view.due_label == "2024-01-10"
    assert view.created_label == "2024-01-01"
    form = edit_form_for(view)
    assert form == TaskForm(title="title a", description="desc a", due_date="2024-01-10", task_id="a")


def test_empty_render():
    model = build_render_model([])
    assert model.pending == [] and model.completed == []
    assert model.find("x") is None


def test_missing_fields():
    assert TaskForm(title=" ", description="d", due_date="").missing_fields() == ["title", "due_date"]


def test_view_carries_only_display_fields():
    view = build_render_model([make_task("a")]).pending[0]
    assert not hasattr(view, "due_date")
    assert edit_form_for(view).due_date == view.due_label
