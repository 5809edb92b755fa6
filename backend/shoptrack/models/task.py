from datetime import date, datetime
from sqlmodel import SQLModel, Field

from shoptrack.models.category import Category


class TaskBase(SQLModel):
    """
    Columns shared by every category's task table.

    Key fields:
    - project_no: the owning project's business key (matched by value)
    - status: free text; only "completed" moves the completed counter
    - approve_status: "Approved" / "Pending", set from the project's status
      when the task is created by a file upload
    """

    id: int | None = Field(default=None, primary_key=True)
    title: str
    description: str | None = Field(default=None)
    priority: str | None = Field(default=None)
    status: str = Field(default="pending")
    project_no: str = Field(index=True)
    due_date: date | None = Field(default=None)
    approve_status: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class PanelTask(TaskBase, table=True):
    __tablename__ = "panel_tasks"


class DoorTask(TaskBase, table=True):
    __tablename__ = "door_tasks"


class CuttingTask(TaskBase, table=True):
    __tablename__ = "cutting_tasks"


class AccessoriesTask(TaskBase, table=True):
    __tablename__ = "accessories_tasks"


class StripCurtainTask(TaskBase, table=True):
    __tablename__ = "strip_curtain_tasks"


class SystemTask(TaskBase, table=True):
    __tablename__ = "system_tasks"


class TransportationTask(TaskBase, table=True):
    __tablename__ = "transportation_tasks"


class QuotationTask(TaskBase, table=True):
    __tablename__ = "quotation_tasks"


TASK_MODELS: dict[Category, type[TaskBase]] = {
    Category.PANEL: PanelTask,
    Category.DOOR: DoorTask,
    Category.CUTTING: CuttingTask,
    Category.ACCESSORIES: AccessoriesTask,
    Category.STRIP_CURTAIN: StripCurtainTask,
    Category.SYSTEM: SystemTask,
    Category.TRANSPORTATION: TransportationTask,
    Category.QUOTATION: QuotationTask,
}


def task_model_for(category: Category) -> type[TaskBase]:
    return TASK_MODELS[category]
