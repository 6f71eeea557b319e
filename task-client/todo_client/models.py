from datetime import date, datetime
from pydantic import BaseModel


class Task(BaseModel):
    id: str
    title: str
    description: str
    dueDate: date
    dateCreated: datetime
    completed: bool = False
