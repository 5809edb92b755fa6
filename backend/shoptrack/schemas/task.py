from datetime import date, datetime
from pydantic import BaseModel, field_validator


def _blank_to_none(value):
    # Forms send "" for cleared optional inputs
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class TaskCreate(BaseModel):
    """Schema for creating a new task. Status defaults to "pending"."""
    title: str
    project_no: str
    description: str | None = None
    priority: str | None = None
    status: str | None = None
    due_date: date | None = None
    approve_status: str | None = None

    @field_validator("description", "due_date", mode="before")
    @classmethod
    def clear_blank(cls, value):
        return _blank_to_none(value)


class TaskUpdate(BaseModel):
    """
    Schema for updating a task.

    Only fields present in the body are written. Moving a task to another
    project is done by sending a new project_no.
    """
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    status: str | None = None
    project_no: str | None = None
    due_date: date | None = None
    approve_status: str | None = None

    @field_validator("description", "due_date", mode="before")
    @classmethod
    def clear_blank(cls, value):
        return _blank_to_none(value)


class TaskRead(BaseModel):
    """Schema for reading a task."""
    id: int
    title: str
    description: str | None
    priority: str | None
    status: str
    project_no: str
    due_date: date | None
    approve_status: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
