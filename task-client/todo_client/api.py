"""HTTP client for the task service REST API."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from todo_client.models import Task

logger = logging.getLogger(__name__)

_task_list = TypeAdapter(List[Task])


class TaskApiError(Exception):
    """Any non-success outcome of an API call (HTTP status, transport or payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TaskApiClient:
    """
    Thin wrapper over httpx bound to a single base URL.

    Pass ``http`` to reuse an existing client (e.g. a FastAPI TestClient);
    otherwise one is created for ``base_url`` and owned by this object.
    No timeout and no retries: a failed call surfaces as TaskApiError.
    """

    def __init__(self, base_url: str = "http://localhost:3000",
                 http: Optional[httpx.Client] = None) -> None:
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=None)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, what: str, **kwargs) -> Any:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TaskApiError(f"Failed to {what}: {e}") from e
        if response.status_code != 200:
            raise TaskApiError(f"Failed to {what}: {response.status_code}", response.status_code)
        return response.json()

    def _envelope_task(self, data: Any, what: str) -> Task:
        try:
            task = Task.model_validate(data["task"])
        except (KeyError, TypeError, ValidationError) as e:
            raise TaskApiError(f"Failed to {what}: unexpected response {data!r}") from e
        logger.debug("%s: %s", data.get("message"), task.id)
        return task

    def list_tasks(self, sort_by: Optional[str] = None) -> List[Task]:
        params = {"sortBy": sort_by} if sort_by else None
        data = self._request("GET", "/api/tasks", "get tasks from server", params=params)
        try:
            return _task_list.validate_python(data)
        except ValidationError as e:
            raise TaskApiError(f"Failed to get tasks from server: {e}") from e

    def create_task(self, title: str, description: str, due_date: date) -> Task:
        body = {"title": title, "description": description, "dueDate": due_date.isoformat()}
        data = self._request("POST", "/api/tasks/todo", "create new task", json=body)
        return self._envelope_task(data, "create new task")

    def complete_task(self, task_id: str) -> Task:
        data = self._request("PATCH", f"/api/tasks/complete/{task_id}", "complete task",
                             json={"completed": True})
        return self._envelope_task(data, "complete task")

    def uncomplete_task(self, task_id: str) -> Task:
        data = self._request("PATCH", f"/api/tasks/notComplete/{task_id}",
                             "make the task not complete", json={"completed": False})
        return self._envelope_task(data, "make the task not complete")

    def delete_task(self, task_id: str) -> Task:
        data = self._request("DELETE", f"/api/tasks/delete/{task_id}", "delete task")
        return self._envelope_task(data, "delete task")

    def update_task(self, task_id: str, title: str, description: str, due_date: date) -> Task:
        body = {"title": title, "description": description, "dueDate": due_date.isoformat()}
        data = self._request("PUT", f"/api/tasks/update/{task_id}", "edit task", json=body)
        return self._envelope_task(data, "edit task")
