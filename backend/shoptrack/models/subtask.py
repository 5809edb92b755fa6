from datetime import datetime
from sqlmodel import SQLModel, Field


class Subtask(SQLModel, table=True):
    """Checklist item under a category task. Not counted on the project."""

    __tablename__ = "subtasks"

    id: int | None = Field(default=None, primary_key=True)
    title: str
    status: str = Field(default="pending")
    project_id: int = Field(index=True)
    category_task_id: int = Field(index=True)
    category: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
