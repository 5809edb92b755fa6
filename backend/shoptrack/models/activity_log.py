from datetime import datetime
from typing import Any
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class ActivityLog(SQLModel, table=True):
    """Audit trail of project and file changes."""

    __tablename__ = "activity_logs"

    id: int | None = Field(default=None, primary_key=True)
    timestamp: datetime = Field(default_factory=datetime.utcnow, index=True)
    user_id: int | None = Field(default=None, index=True)
    activity_type: str = Field(index=True)  # CREATE, UPDATE, DELETE, UPLOAD
    resource_type: str = Field(index=True)  # PROJECT, FILE
    resource_id: str | None = Field(default=None)
    message: str
    details: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
