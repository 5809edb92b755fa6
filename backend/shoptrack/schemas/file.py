from datetime import datetime
from pydantic import BaseModel


class ProjectFileRead(BaseModel):
    """File metadata. The BLOB itself is served by its own endpoint."""
    id: int
    project_no: str
    file_name: str
    file_size: int
    mime_type: str | None
    category: str | None
    task_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UploadResult(BaseModel):
    message: str
    category: str | None
    count: int
    tasks_created: int
    last_task_id: int | None
    files: list[ProjectFileRead]


class FileDeleteResult(BaseModel):
    message: str
    file_id: int
    task_deleted: bool
    task_id: int | None
