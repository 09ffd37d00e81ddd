from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Annotated, Any, Dict, Optional

# Task ids are SQL INTEGER primary keys: signed 64-bit
TaskId = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]

class TaskCreate(BaseModel):
    """Input for ``createTask``."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None

class TaskToggle(BaseModel):
    """Input for ``toggleTask``: the target state, not a flip."""
    id: TaskId
    completed: bool

class TaskUpdate(BaseModel):
    """Input for ``updateTask``.

    Fields left out of the request are left unchanged on the task.  Only
    ``description`` may be sent as ``null``, which clears it.
    """
    id: TaskId
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title", "completed")
    @classmethod
    def _reject_null(cls, value, info):
        # Defaults are not validated, so this only fires for an explicit null.
        if value is None:
            raise ValueError(f"{info.field_name} may be omitted but not null")
        return value

    def changes(self) -> Dict[str, Any]:
        """Fields actually present in the request, excluding ``id``."""
        return self.model_dump(exclude_unset=True, exclude={"id"})

class TaskDelete(BaseModel):
    """Input for ``deleteTask``."""
    id: TaskId

class DeleteResult(BaseModel):
    success: bool = True

class Task(BaseModel):
    """A task as transmitted to clients."""
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
