from datetime import date, datetime
from pydantic import BaseModel


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str
    dueDate: date
    dateCreated: datetime
    completed: bool = False


class TaskEnvelope(BaseModel):
    task: TaskResponse
    message: str
