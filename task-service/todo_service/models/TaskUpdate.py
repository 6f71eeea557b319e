from todo_service.models.TaskCreate import TaskCreate


class TaskUpdate(TaskCreate):
    """Full update: title, description and dueDate are all overwritten."""
