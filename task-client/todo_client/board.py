"""Client state-sync: every action is one request followed by a full refetch."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from todo_client.api import TaskApiClient, TaskApiError
from todo_client.render import (
    DELETE,
    DONE,
    EDIT,
    NOT_DONE,
    RenderModel,
    TaskForm,
    build_render_model,
    edit_form_for,
)

logger = logging.getLogger(__name__)

SORT_CHOICES = (None, "dueDate", "dateCreated")
FILL_ALL_FIELDS = "Please fill in all fields."


class TaskBoard:
    """
    Holds the last render model and the active sort key.

    The server is the source of truth: nothing is patched locally. A failed
    request is logged and leaves ``model`` exactly as it was.
    """

    def __init__(self, api: TaskApiClient,
                 alert: Optional[Callable[[str], None]] = None) -> None:
        self.api = api
        self.alert = alert or (lambda message: logger.warning("%s", message))
        self.sort_by: Optional[str] = None
        self.model = RenderModel()
        self.form = TaskForm()

    def refresh(self) -> bool:
        try:
            tasks = self.api.list_tasks(self.sort_by)
        except TaskApiError as e:
            logger.error("Error: %s", e)
            return False
        self.model = build_render_model(tasks)
        return True

    def set_sort(self, sort_by: Optional[str]) -> bool:
        if sort_by not in SORT_CHOICES:
            raise ValueError(f"sort key must be one of {SORT_CHOICES}, got {sort_by!r}")
        self.sort_by = sort_by
        return self.refresh()

    def _validated(self, form: TaskForm) -> Optional[date]:
        if form.missing_fields():
            self.alert(FILL_ALL_FIELDS)
            return None
        try:
            return date.fromisoformat(form.due_date.strip())
        except ValueError:
            self.alert(f"Invalid due date: {form.due_date!r}")
            return None

    def _mutate(self, call: Callable[[], object]) -> bool:
        try:
            call()
        except TaskApiError as e:
            logger.error("Error: %s", e)
            return False
        return self.refresh()

    def create(self, form: Optional[TaskForm] = None) -> bool:
        form = form if form is not None else self.form
        due = self._validated(form)
        if due is None:
            return False
        ok = self._mutate(lambda: self.api.create_task(form.title.strip(), form.description.strip(), due))
        if ok:
            self.form = TaskForm()
        return ok

    def complete(self, task_id: str) -> bool:
        return self._mutate(lambda: self.api.complete_task(task_id))

    def uncomplete(self, task_id: str) -> bool:
        return self._mutate(lambda: self.api.uncomplete_task(task_id))

    def delete(self, task_id: str) -> bool:
        return self._mutate(lambda: self.api.delete_task(task_id))

    def begin_edit(self, task_id: str) -> Optional[TaskForm]:
        """Pre-filled edit form, only for tasks in the pending list."""
        view = next((v for v in self.model.pending if v.id == task_id), None)
        if view is None:
            logger.warning("Task %s is not editable", task_id)
            return None
        return edit_form_for(view)

    def submit_edit(self, form: TaskForm) -> bool:
        if form.task_id is None:
            raise ValueError("edit form has no task_id")
        due = self._validated(form)
        if due is None:
            return False
        return self._mutate(lambda: self.api.update_task(
            form.task_id, form.title.strip(), form.description.strip(), due))

    def perform(self, action: str, task_id: str) -> bool:
        """Run one of the actions a rendered item exposes."""
        view = self.model.find(task_id)
        if view is None or action not in view.actions:
            logger.warning("Action %r is not available for task %s", action, task_id)
            return False
        if action == DONE:
            return self.complete(task_id)
        if action == NOT_DONE:
            return self.uncomplete(task_id)
        if action == DELETE:
            return self.delete(task_id)
        if action == EDIT:
            raise ValueError("edit needs a form: use begin_edit() and submit_edit()")
        return False
