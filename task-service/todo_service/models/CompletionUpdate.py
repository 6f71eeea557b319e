from typing import Optional
from pydantic import BaseModel


class CompletionUpdate(BaseModel):
    completed: Optional[bool] = None
