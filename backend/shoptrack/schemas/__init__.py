from shoptrack.schemas.completion import (
    CategoryCompletion,
    CounterDrift,
    ReconcileResult,
    ReconcileQueued,
)
from shoptrack.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectStatusUpdate,
    ProjectRead,
    ProjectWithCompletion,
)
from shoptrack.schemas.task import TaskCreate, TaskUpdate, TaskRead
from shoptrack.schemas.file import ProjectFileRead, UploadResult, FileDeleteResult
from shoptrack.schemas.activity import ActivityLogRead
from shoptrack.schemas.subtask import SubtaskCreate, SubtaskRead
from shoptrack.schemas.order import OrderItem, OrderCreate, OrderStatusUpdate, OrderRead

__all__ = [
    "CategoryCompletion",
    "CounterDrift",
    "ReconcileResult",
    "ReconcileQueued",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectStatusUpdate",
    "ProjectRead",
    "ProjectWithCompletion",
    "TaskCreate",
    "TaskUpdate",
    "TaskRead",
    "ProjectFileRead",
    "UploadResult",
    "FileDeleteResult",
    "ActivityLogRead",
    "SubtaskCreate",
    "SubtaskRead",
    "OrderItem",
    "OrderCreate",
    "OrderStatusUpdate",
    "OrderRead",
]
