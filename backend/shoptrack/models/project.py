from datetime import date, datetime
from sqlmodel import SQLModel, Field


class Project(SQLModel, table=True):
    """
    A fabrication-shop project.

    project_no is the business key that task, file and subtask rows point
    at by value; there is no enforced foreign key.

    The total_* / completed_* columns are the counter store: one pair per
    task category, maintained by services.counters and repairable by
    services.completion.reconcile_project_counters.
    """

    __tablename__ = "projects"

    id: int | None = Field(default=None, primary_key=True)
    project_no: str = Field(index=True, unique=True)
    project_name: str | None = Field(default=None)
    customer: str
    salesman: str | None = Field(default=None)
    drawing_date: date | None = Field(default=None)
    po_payment: str | None = Field(default=None)
    requested_delivery: date | None = Field(default=None)
    remark: str | None = Field(default=None)
    status: str = Field(default="active", index=True)

    # Counter store
    total_panel: int = Field(default=0)
    completed_panel: int = Field(default=0)
    total_door: int = Field(default=0)
    completed_door: int = Field(default=0)
    total_cutting: int = Field(default=0)
    completed_cutting: int = Field(default=0)
    total_accessories: int = Field(default=0)
    completed_accessories: int = Field(default=0)
    total_strip_curtain: int = Field(default=0)
    completed_strip_curtain: int = Field(default=0)
    total_system: int = Field(default=0)
    completed_system: int = Field(default=0)
    total_transportation: int = Field(default=0)
    completed_transportation: int = Field(default=0)
    total_quotation: int = Field(default=0)
    completed_quotation: int = Field(default=0)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
