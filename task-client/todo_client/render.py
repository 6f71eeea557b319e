"""Pure mapping from a task array to what the lists display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from todo_client.models import Task

EDIT = "edit"
DONE = "done"
NOT_DONE = "notDone"
DELETE = "delete"

PENDING_ACTIONS = (EDIT, DONE, DELETE)
COMPLETED_ACTIONS = (NOT_DONE, DELETE)


@dataclass(frozen=True)
class TaskView:
    id: str
    title: str
    description: str
    due_label: str
    created_label: str
    struck_through: bool
    actions: Tuple[str, ...]


@dataclass(frozen=True)
class RenderModel:
    pending: List[TaskView] = field(default_factory=list)
    completed: List[TaskView] = field(default_factory=list)

    def find(self, task_id: str) -> TaskView | None:
        for view in self.pending + self.completed:
            if view.id == task_id:
                return view
        return None


@dataclass
class TaskForm:
    """Values of the create form or of the edit form (task_id set)."""

    title: str = ""
    description: str = ""
    due_date: str = ""
    task_id: str | None = None

    def missing_fields(self) -> List[str]:
        return [name for name in ("title", "description", "due_date")
                if not getattr(self, name).strip()]


def task_view(task: Task) -> TaskView:
    return TaskView(
        id=task.id,
        title=task.title,
        description=task.description,
        due_label=task.dueDate.isoformat(),
        created_label=task.dateCreated.date().isoformat(),
        struck_through=task.completed,
        actions=COMPLETED_ACTIONS if task.completed else PENDING_ACTIONS,
    )


def build_render_model(tasks: Iterable[Task]) -> RenderModel:
    """Partition by completion, keeping server order inside each list."""
    pending: List[TaskView] = []
    completed: List[TaskView] = []
    for task in tasks:
        (completed if task.completed else pending).append(task_view(task))
    return RenderModel(pending=pending, completed=completed)


def edit_form_for(view: TaskView) -> TaskForm:
    return TaskForm(
        title=view.title,
        description=view.description,
        due_date=view.due_label,
        task_id=view.id,
    )
