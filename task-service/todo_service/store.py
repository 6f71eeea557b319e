"""Task storage: one document per task plus ascending dueDate/dateCreated indexes."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

import redis
from pydantic import ValidationError

from todo_service.models import TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)

SORT_KEYS = ("dueDate", "dateCreated")

TASK_KEY = "task:{}"
ALL_TASKS_KEY = "tasks"
INDEX_KEYS = {
    "dueDate": "tasks:index:dueDate",
    "dateCreated": "tasks:index:dateCreated",
}


class TaskNotFound(Exception):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class StorageError(Exception):
    """The backing store is unreachable or rejected the read/write."""


class TaskStore(Protocol):
    def ping(self) -> None: ...

    def sync_indexes(self) -> int: ...

    def list_tasks(self, sort_by: Optional[str] = None) -> List[TaskResponse]: ...

    def create_task(self, data: TaskCreate) -> TaskResponse: ...

    def set_completed(self, task_id: str, completed: bool) -> TaskResponse: ...

    def delete_task(self, task_id: str) -> TaskResponse: ...

    def update_task(self, task_id: str, data: TaskUpdate) -> TaskResponse: ...

    def close(self) -> None: ...


def new_task(data: TaskCreate) -> TaskResponse:
    return TaskResponse(
        id=str(uuid.uuid4()),
        title=data.title,
        description=data.description,
        dueDate=data.dueDate,
        dateCreated=datetime.now(timezone.utc),
        completed=False,
    )


def index_score(task: TaskResponse, sort_by: str) -> float:
    if sort_by == "dueDate":
        return float(task.dueDate.toordinal())
    return task.dateCreated.timestamp()


class InMemoryTaskStore:
    """Dict-backed store; insertion order is the natural storage order."""

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskResponse] = {}

    def ping(self) -> None:
        return

    def sync_indexes(self) -> int:
        return len(self._tasks)

    def close(self) -> None:
        return

    def list_tasks(self, sort_by: Optional[str] = None) -> List[TaskResponse]:
        tasks = [t.model_copy() for t in self._tasks.values()]
        if sort_by in SORT_KEYS:
            tasks.sort(key=lambda t: (index_score(t, sort_by), t.id))
        return tasks

    def create_task(self, data: TaskCreate) -> TaskResponse:
        task = new_task(data)
        self._tasks[task.id] = task
        return task.model_copy()

    def _get(self, task_id: str) -> TaskResponse:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def set_completed(self, task_id: str, completed: bool) -> TaskResponse:
        task = self._get(task_id).model_copy(update={"completed": completed})
        self._tasks[task_id] = task
        return task.model_copy()

    def delete_task(self, task_id: str) -> TaskResponse:
        self._get(task_id)
        return self._tasks.pop(task_id)

    def update_task(self, task_id: str, data: TaskUpdate) -> TaskResponse:
        task = self._get(task_id).model_copy(update=data.model_dump())
        self._tasks[task_id] = task
        return task.model_copy()


class RedisTaskStore:
    """
    Redis-backed store.

    Layout:
    - task:{id}                 JSON document
    - tasks                     set of all ids (natural order)
    - tasks:index:dueDate       sorted set, score = due date ordinal
    - tasks:index:dateCreated   sorted set, score = creation epoch seconds
    """

    def __init__(self, client: redis.Redis) -> None:
        self.r = client

    @classmethod
    def from_settings(cls, settings) -> "RedisTaskStore":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )
        return cls(client)

    def close(self) -> None:
        self.r.close()

    def ping(self) -> None:
        try:
            self.r.ping()
        except redis.RedisError as e:
            raise StorageError(f"Cannot reach redis: {e}") from e

    @staticmethod
    def _dump(task: TaskResponse) -> str:
        return task.model_dump_json()

    @staticmethod
    def _load(raw: str) -> TaskResponse:
        try:
            return TaskResponse.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Corrupt task document: {e}") from e

    def sync_indexes(self) -> int:
        """Rebuild the id set and both sort indexes from the stored documents."""
        try:
            tasks = []
            for key in self.r.scan_iter(match=TASK_KEY.format("*")):
                raw = self.r.get(key)
                if raw is not None:
                    tasks.append(self._load(raw))
            with self.r.pipeline(transaction=True) as p:
                p.delete(ALL_TASKS_KEY, *INDEX_KEYS.values())
                for task in tasks:
                    p.sadd(ALL_TASKS_KEY, task.id)
                    for sort_by, index_key in INDEX_KEYS.items():
                        p.zadd(index_key, {task.id: index_score(task, sort_by)})
                p.execute()
        except redis.RedisError as e:
            raise StorageError(f"Failed to sync indexes: {e}") from e
        return len(tasks)

    def list_tasks(self, sort_by: Optional[str] = None) -> List[TaskResponse]:
        try:
            if sort_by in SORT_KEYS:
                ids = self.r.zrange(INDEX_KEYS[sort_by], 0, -1)
            else:
                ids = list(self.r.smembers(ALL_TASKS_KEY))
            if not ids:
                return []
            raw = self.r.mget([TASK_KEY.format(task_id) for task_id in ids])
        except redis.RedisError as e:
            raise StorageError(f"Failed to list tasks: {e}") from e
        # a document can vanish between the index read and mget
        return [self._load(doc) for doc in raw if doc is not None]

    def create_task(self, data: TaskCreate) -> TaskResponse:
        task = new_task(data)
        try:
            with self.r.pipeline(transaction=True) as p:
                p.set(TASK_KEY.format(task.id), self._dump(task))
                p.sadd(ALL_TASKS_KEY, task.id)
                for sort_by, index_key in INDEX_KEYS.items():
                    p.zadd(index_key, {task.id: index_score(task, sort_by)})
                p.execute()
        except redis.RedisError as e:
            raise StorageError(f"Failed to create task: {e}") from e
        return task

    def _rewrite(self, task_id: str, changes: dict) -> TaskResponse:
        key = TASK_KEY.format(task_id)

        def apply(pipe) -> TaskResponse:
            raw = pipe.get(key)
            if raw is None:
                raise TaskNotFound(task_id)
            task = self._load(raw).model_copy(update=changes)
            pipe.multi()
            pipe.set(key, self._dump(task))
            if "dueDate" in changes:
                pipe.zadd(INDEX_KEYS["dueDate"], {task_id: index_score(task, "dueDate")})
            return task

        try:
            return self.r.transaction(apply, key, value_from_callable=True)
        except redis.RedisError as e:
            raise StorageError(f"Failed to update task {task_id}: {e}") from e

    def set_completed(self, task_id: str, completed: bool) -> TaskResponse:
        return self._rewrite(task_id, {"completed": completed})

    def update_task(self, task_id: str, data: TaskUpdate) -> TaskResponse:
        return self._rewrite(task_id, data.model_dump())

    def delete_task(self, task_id: str) -> TaskResponse:
        key = TASK_KEY.format(task_id)

        def remove(pipe) -> TaskResponse:
            raw = pipe.get(key)
            if raw is None:
                raise TaskNotFound(task_id)
            task = self._load(raw)
            pipe.multi()
            pipe.delete(key)
            pipe.srem(ALL_TASKS_KEY, task_id)
            for index_key in INDEX_KEYS.values():
                pipe.zrem(index_key, task_id)
            return task

        try:
            return self.r.transaction(remove, key, value_from_callable=True)
        except redis.RedisError as e:
            raise StorageError(f"Failed to delete task {task_id}: {e}") from e


def build_store(settings) -> TaskStore:
    if settings.store_backend == "memory":
        logger.warning("Using in-memory task store; data is lost on restart")
        return InMemoryTaskStore()
    return RedisTaskStore.from_settings(settings)
