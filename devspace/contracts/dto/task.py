from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Operator-set task status. No transitions happen inside the core."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


class TaskCreate(BaseModel):
    """Create task request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(..., min_length=1, max_length=1000)
    engineer_id: str | None = None
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("engineer_id", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TaskDTO(BaseModel):
    """Task record as persisted in the ``tasks`` collection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    engineer_id: str | None = None
    status: TaskStatus
    output: str | None = None
    created_at: datetime
