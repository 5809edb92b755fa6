from shoptrack.models.category import Category, CounterKind
from shoptrack.models.project import Project
from shoptrack.models.task import (
    TaskBase,
    PanelTask,
    DoorTask,
    CuttingTask,
    AccessoriesTask,
    StripCurtainTask,
    SystemTask,
    TransportationTask,
    QuotationTask,
    TASK_MODELS,
    task_model_for,
)
from shoptrack.models.project_file import ProjectFile
from shoptrack.models.activity_log import ActivityLog
from shoptrack.models.subtask import Subtask
from shoptrack.models.order import Order

__all__ = [
    "Category",
    "CounterKind",
    "Project",
    "TaskBase",
    "PanelTask",
    "DoorTask",
    "CuttingTask",
    "AccessoriesTask",
    "StripCurtainTask",
    "SystemTask",
    "TransportationTask",
    "QuotationTask",
    "TASK_MODELS",
    "task_model_for",
    "ProjectFile",
    "ActivityLog",
    "Subtask",
    "Order",
]
