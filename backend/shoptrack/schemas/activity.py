from datetime import datetime
from typing import Any
from pydantic import BaseModel


class ActivityLogRead(BaseModel):
    id: int
    timestamp: datetime
    user_id: int | None
    activity_type: str
    resource_type: str
    resource_id: str | None
    message: str
    details: dict[str, Any] | None

    model_config = {"from_attributes": True}
