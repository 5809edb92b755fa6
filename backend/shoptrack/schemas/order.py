from datetime import datetime
from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    description: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str | None = None


class OrderCreate(BaseModel):
    """Schema for creating an order. Needs at least one line item."""
    task_id: int
    project_no: str
    task_title: str
    items: list[OrderItem] = Field(min_length=1)
    status: str | None = None
    category: str | None = None


class OrderStatusUpdate(BaseModel):
    status: str


class OrderRead(BaseModel):
    id: int
    task_id: int
    project_no: str
    task_title: str
    items: list[OrderItem]
    status: str
    category: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
