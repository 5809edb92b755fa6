from datetime import datetime
from sqlalchemy import Column, LargeBinary
from sqlmodel import SQLModel, Field


class ProjectFile(SQLModel, table=True):
    """
    A file attachment stored as a BLOB.

    task_id links the file to the task row created for it on upload; the
    table is identified by category.
    """

    __tablename__ = "project_files"

    id: int | None = Field(default=None, primary_key=True)
    project_no: str = Field(index=True)
    file_name: str
    file_size: int = Field(default=0)
    mime_type: str | None = Field(default=None)
    file_data: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    category: str | None = Field(default=None, index=True)
    task_id: int | None = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
