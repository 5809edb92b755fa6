"""
Task operations shared by every category.

Each mutation writes the task row first and then brings the project
counters in line through the lifecycle hooks. Both happen in the caller's
session, so they commit together; a failed counter update is logged by the
counter service and does not undo the task change.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from shoptrack.exceptions import BadRequestError, NotFoundError
from shoptrack.logging_config import get_logger
from shoptrack.models import Category, TaskBase, task_model_for
from shoptrack.schemas import TaskCreate, TaskUpdate
from shoptrack.services.hooks import TaskState, sync_counters
from shoptrack.services.status import DEFAULT_TASK_STATUS

logger = get_logger(__name__)

# Columns that may not be cleared by an update
REQUIRED_FIELDS = ("title", "project_no", "status")


def _state(task: TaskBase) -> TaskState:
    return TaskState(project_no=task.project_no, status=task.status)


def _require_text(value: str | None, field: str, label: str) -> str:
    if value is None or not value.strip():
        raise BadRequestError(f"{label} is required", field=field)
    return value


async def create_task(
    session: AsyncSession,
    category: Category,
    task_in: TaskCreate,
) -> TaskBase:
    """Insert a task and count it on its project."""
    _require_text(task_in.title, "title", "Title")
    _require_text(task_in.project_no, "project_no", "Project No")

    task_data = task_in.model_dump()
    if not task_data["status"]:
        task_data["status"] = DEFAULT_TASK_STATUS

    task = task_model_for(category)(**task_data)
    session.add(task)
    await session.flush()
    await session.refresh(task)

    await sync_counters(session, category, None, _state(task))

    logger.info(
        f"Created {category.value} task: id={task.id} title='{task.title}' "
        f"project={task.project_no} status={task.status}"
    )
    return task


async def list_tasks(
    session: AsyncSession,
    category: Category,
    project_no: str | None = None,
    approve_status: str | None = None,
) -> list[TaskBase]:
    """List a category's tasks, newest first."""
    model = task_model_for(category)
    query = select(model)
    if project_no:
        query = query.where(model.project_no == project_no)
    if approve_status:
        query = query.where(model.approve_status == approve_status)
    query = query.order_by(model.created_at.desc(), model.id.desc())

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_task(
    session: AsyncSession,
    category: Category,
    task_id: int,
) -> TaskBase:
    task = await session.get(task_model_for(category), task_id)
    if not task:
        raise NotFoundError(f"{category.label} task", task_id)
    return task


async def update_task(
    session: AsyncSession,
    category: Category,
    task_id: int,
    task_in: TaskUpdate,
) -> TaskBase:
    """
    Apply a partial update.

    A status change moves the completed counter; a project_no change moves
    the task's counts from the old project to the new one. Omitted fields
    keep their current values.
    """
    update_data = task_in.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("Request body must contain fields to update.")

    for field in REQUIRED_FIELDS:
        if field in update_data:
            _require_text(update_data[field], field, field.replace("_", " ").capitalize())

    task = await get_task(session, category, task_id)
    before = _state(task)

    logger.info(f"Updating {category.value} task {task_id}: {update_data}")

    for field, value in update_data.items():
        setattr(task, field, value)

    await session.flush()
    await session.refresh(task)

    await sync_counters(session, category, before, _state(task))

    return task


async def delete_task(
    session: AsyncSession,
    category: Category,
    task_id: int,
) -> TaskState:
    """Delete a task and remove it from its project's counts."""
    task = await get_task(session, category, task_id)
    before = _state(task)

    logger.info(f"Deleting {category.value} task {task_id}: '{task.title}'")

    await session.delete(task)
    await session.flush()

    await sync_counters(session, category, before, None)

    return before
