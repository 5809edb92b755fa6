from datetime import datetime
from pydantic import BaseModel


class SubtaskCreate(BaseModel):
    title: str
    project_id: int
    category_task_id: int
    status: str | None = None
    category: str | None = None


class SubtaskRead(BaseModel):
    id: int
    title: str
    status: str
    project_id: int
    category_task_id: int
    category: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
