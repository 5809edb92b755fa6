from datetime import date, datetime
from pydantic import BaseModel

from shoptrack.schemas.completion import CategoryCompletion


class ProjectCreate(BaseModel):
    """
    Schema for creating a new project.

    Counters normally start at zero; they may be seeded when a project is
    migrated in with existing tasks.
    """
    project_no: str
    customer: str
    project_name: str | None = None
    salesman: str | None = None
    drawing_date: date | None = None
    po_payment: str | None = None
    requested_delivery: date | None = None
    remark: str | None = None
    status: str = "active"

    total_panel: int = 0
    completed_panel: int = 0
    total_door: int = 0
    completed_door: int = 0
    total_cutting: int = 0
    completed_cutting: int = 0
    total_accessories: int = 0
    completed_accessories: int = 0
    total_strip_curtain: int = 0
    completed_strip_curtain: int = 0
    total_system: int = 0
    completed_system: int = 0
    total_transportation: int = 0
    completed_transportation: int = 0
    total_quotation: int = 0
    completed_quotation: int = 0


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Counters are not writable here."""
    project_no: str | None = None
    customer: str | None = None
    project_name: str | None = None
    salesman: str | None = None
    drawing_date: date | None = None
    po_payment: str | None = None
    requested_delivery: date | None = None
    remark: str | None = None


class ProjectStatusUpdate(BaseModel):
    status: str


class ProjectRead(BaseModel):
    """Schema for reading a project."""
    id: int
    project_no: str
    customer: str
    project_name: str | None
    salesman: str | None
    drawing_date: date | None
    po_payment: str | None
    requested_delivery: date | None
    remark: str | None
    status: str

    total_panel: int
    completed_panel: int
    total_door: int
    completed_door: int
    total_cutting: int
    completed_cutting: int
    total_accessories: int
    completed_accessories: int
    total_strip_curtain: int
    completed_strip_curtain: int
    total_system: int
    completed_system: int
    total_transportation: int
    completed_transportation: int
    total_quotation: int
    completed_quotation: int

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectWithCompletion(ProjectRead):
    """Project plus completion computed from live task rows."""
    completion: dict[str, CategoryCompletion]
