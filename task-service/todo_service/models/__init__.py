from todo_service.models.TaskCreate import TaskCreate
from todo_service.models.TaskUpdate import TaskUpdate
from todo_service.models.CompletionUpdate import CompletionUpdate
from todo_service.models.TaskResponse import TaskResponse, TaskEnvelope

__all__ = ["TaskCreate", "TaskUpdate", "CompletionUpdate", "TaskResponse", "TaskEnvelope"]
