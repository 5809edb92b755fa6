"""
Task routes for the Shoptrack API.

Every category gets the same CRUD surface under its own prefix
(/api/panel-tasks, /api/door-tasks, ...), built by build_task_router.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shoptrack.database import get_session
from shoptrack.models import Category, TaskBase
from shoptrack.schemas import TaskCreate, TaskUpdate, TaskRead
from shoptrack.services import tasks as task_service
from shoptrack.logging_config import get_logger

logger = get_logger(__name__)


def build_task_router(category: Category) -> APIRouter:
    """Create the CRUD router for one task category."""
    router = APIRouter()

    @router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
    async def create_task(
        task_in: TaskCreate,
        session: AsyncSession = Depends(get_session),
    ) -> TaskBase:
        """
        Create a task.

        Counts it on its project: total +1, and completed +1 when created
        with status "completed".
        """
        return await task_service.create_task(session, category, task_in)

    @router.get("/", response_model=list[TaskRead])
    async def list_tasks(
        project_no: str | None = None,
        approve_status: str | None = None,
        session: AsyncSession = Depends(get_session),
    ) -> list[TaskBase]:
        """
        List tasks, newest first.

        Optionally filter by project_no and approve_status.
        """
        tasks = await task_service.list_tasks(session, category, project_no, approve_status)
        logger.debug(f"Listed {len(tasks)} {category.value} tasks")
        return tasks

    @router.get("/{task_id}", response_model=TaskRead)
    async def get_task(
        task_id: int,
        session: AsyncSession = Depends(get_session),
    ) -> TaskBase:
        return await task_service.get_task(session, category, task_id)

    @router.patch("/{task_id}", response_model=TaskRead)
    async def update_task(
        task_id: int,
        task_in: TaskUpdate,
        session: AsyncSession = Depends(get_session),
    ) -> TaskBase:
        """
        Update a task.

        Status changes into or out of "completed" adjust the completed
        counter; a new project_no moves the task's counts between projects.
        """
        return await task_service.update_task(session, category, task_id, task_in)

    @router.delete("/{task_id}")
    async def delete_task(
        task_id: int,
        session: AsyncSession = Depends(get_session),
    ) -> dict:
        """Delete a task and remove it from its project's counts."""
        await task_service.delete_task(session, category, task_id)
        return {"message": "Task deleted successfully"}

    return router
