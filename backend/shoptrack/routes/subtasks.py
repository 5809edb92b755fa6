"""
Subtask routes for the Shoptrack API.

Subtasks are checklist items under a category task; they do not touch the
project counters.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from shoptrack.database import get_session
from shoptrack.models import Subtask
from shoptrack.schemas import SubtaskCreate, SubtaskRead
from shoptrack.services.status import DEFAULT_TASK_STATUS
from shoptrack.exceptions import BadRequestError, NotFoundError
from shoptrack.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/", response_model=SubtaskRead, status_code=status.HTTP_201_CREATED)
async def create_subtask(
    subtask_in: SubtaskCreate,
    session: AsyncSession = Depends(get_session),
) -> Subtask:
    if not subtask_in.title.strip():
        raise BadRequestError("Title is required", field="title")

    subtask = Subtask(**subtask_in.model_dump())
    if not subtask.status:
        subtask.status = DEFAULT_TASK_STATUS
    session.add(subtask)
    await session.flush()
    await session.refresh(subtask)

    logger.info(f"Created subtask {subtask.id} under task {subtask.category_task_id}")
    return subtask


@router.get("/", response_model=list[SubtaskRead])
async def list_subtasks(
    session: AsyncSession = Depends(get_session),
) -> list[Subtask]:
    result = await session.execute(select(Subtask).order_by(Subtask.id))
    return list(result.scalars().all())


@router.get("/task/{task_id}", response_model=list[SubtaskRead])
async def list_subtasks_for_task(
    task_id: int,
    category: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Subtask]:
    """Subtasks of one category task. Filter by category since task IDs repeat across tables."""
    query = select(Subtask).where(Subtask.category_task_id == task_id)
    if category:
        query = query.where(Subtask.category == category)
    result = await session.execute(query.order_by(Subtask.id))
    return list(result.scalars().all())


@router.patch("/{subtask_id}/done", response_model=SubtaskRead)
async def mark_subtask_done(
    subtask_id: int,
    session: AsyncSession = Depends(get_session),
) -> Subtask:
    subtask = await session.get(Subtask, subtask_id)
    if not subtask:
        raise NotFoundError("Subtask", subtask_id)

    subtask.status = "done"
    await session.flush()
    await session.refresh(subtask)
    return subtask


@router.delete("/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subtask(
    subtask_id: int,
    session: AsyncSession = Depends(get_session),
) -> None:
    subtask = await session.get(Subtask, subtask_id)
    if not subtask:
        raise NotFoundError("Subtask", subtask_id)

    await session.delete(subtask)
