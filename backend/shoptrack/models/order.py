from datetime import datetime
from typing import Any
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """Material order raised against a category task. Not counted on the project."""

    __tablename__ = "orders"

    id: int | None = Field(default=None, primary_key=True)
    task_id: int = Field(index=True)
    project_no: str = Field(index=True)
    task_title: str
    items: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default="pending")
    category: str = Field(default="Accessories")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
