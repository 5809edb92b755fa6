"""
Project routes for the Shoptrack API.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from shoptrack.database import get_session
from shoptrack.models import Category, Order, Project, ProjectFile, TASK_MODELS
from shoptrack.schemas import (
    CategoryCompletion,
    ProjectCreate,
    ProjectUpdate,
    ProjectStatusUpdate,
    ProjectRead,
    ProjectWithCompletion,
    ReconcileResult,
    ReconcileQueued,
)
from shoptrack.services.activity import log_activity
from shoptrack.services.completion import (
    calculate_completion,
    calculate_completion_or_empty,
    reconcile_project_counters,
)
from shoptrack.services.files import get_project_by_no
from shoptrack.worker import enqueue_reconcile
from shoptrack.exceptions import BadRequestError, ConflictError, NotFoundError
from shoptrack.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()

# /status/{name} shortcuts; stored values are matched case-insensitively
STATUS_FILTERS = ("active", "done", "approved")


def sanitize_project_no(project_no: str) -> str:
    """Project numbers end up in URLs; "/" is replaced with "_"."""
    return project_no.strip().replace("/", "_")


async def _with_completion(
    session: AsyncSession,
    projects: list[Project],
) -> list[ProjectWithCompletion]:
    out = []
    for project in projects:
        completion = await calculate_completion_or_empty(session, project.project_no)
        out.append(ProjectWithCompletion(
            **ProjectRead.model_validate(project).model_dump(),
            completion=completion,
        ))
    return out


async def _get_project(session: AsyncSession, project_id: int) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise NotFoundError("Project", project_id)
    return project


@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """
    Create a new project.

    project_no and customer are required. Counters start at zero unless
    seeded in the body.
    """
    if not project_in.project_no.strip():
        raise BadRequestError("Project Number is required", field="project_no")
    if not project_in.customer.strip():
        raise BadRequestError("Customer is required", field="customer")

    project_data = project_in.model_dump()
    project_data["project_no"] = sanitize_project_no(project_in.project_no)

    existing = await session.execute(
        select(Project.id).where(Project.project_no == project_data["project_no"])
    )
    if existing.first() is not None:
        raise ConflictError(f"Project Number '{project_data['project_no']}' already exists.")

    project = Project(**project_data)
    session.add(project)
    try:
        await session.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same number
        raise ConflictError(f"Project Number '{project_data['project_no']}' already exists.") from e
    await session.refresh(project)

    await log_activity(
        session, "CREATE", "PROJECT", project.id,
        f"Project {project.project_no} created for {project.customer}.",
        {"project_no": project.project_no, "customer": project.customer},
    )
    logger.info(f"Created project: id={project.id} project_no='{project.project_no}'")

    return project


@router.get("/", response_model=list[ProjectWithCompletion])
async def list_projects(
    status: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[ProjectWithCompletion]:
    """
    List projects, newest first, each with its completion breakdown.

    Optionally filter by exact status.
    """
    query = select(Project)
    if status:
        query = query.where(Project.status == status)
    query = query.order_by(Project.created_at.desc(), Project.id.desc())

    result = await session.execute(query)
    projects = list(result.scalars().all())

    logger.debug(f"Listed {len(projects)} projects")

    return await _with_completion(session, projects)


@router.get("/status/{status_name}", response_model=list[ProjectWithCompletion])
async def list_projects_by_status(
    status_name: str,
    session: AsyncSession = Depends(get_session),
) -> list[ProjectWithCompletion]:
    """Projects in the active, done or approved state. Other names return []."""
    status_name = status_name.lower()
    if status_name not in STATUS_FILTERS:
        return []

    result = await session.execute(
        select(Project)
        .where(func.lower(Project.status) == status_name)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    return await _with_completion(session, list(result.scalars().all()))


@router.get("/completion/{project_no}", response_model=dict[str, CategoryCompletion])
async def get_project_completion(
    project_no: str,
    session: AsyncSession = Depends(get_session),
) -> dict[str, CategoryCompletion]:
    """Completion per task category, counted from the task tables."""
    await get_project_by_no(session, project_no)
    return await calculate_completion(session, project_no)


@router.post("/{project_no}/reconcile", response_model=ReconcileResult | ReconcileQueued)
async def reconcile_project(
    project_no: str,
    background: bool = False,
    session: AsyncSession = Depends(get_session),
) -> ReconcileResult | ReconcileQueued:
    """
    Rewrite a project's counters from its live task rows.

    With background=true the work is queued for the worker instead.
    """
    if background:
        await get_project_by_no(session, project_no)
        job_id = await enqueue_reconcile(project_no)
        return ReconcileQueued(project_no=project_no, job_id=job_id)

    return await reconcile_project_counters(session, project_no)


@router.get("/{project_id}", response_model=ProjectWithCompletion)
async def get_project(
    project_id: int,
    session: AsyncSession = Depends(get_session),
) -> ProjectWithCompletion:
    """Get a project by ID, with its completion breakdown."""
    project = await _get_project(session, project_id)
    completion = await calculate_completion(session, project.project_no)
    return ProjectWithCompletion(
        **ProjectRead.model_validate(project).model_dump(),
        completion=completion,
    )


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: int,
    project_in: ProjectUpdate,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """
    Update a project's descriptive fields.

    Renumbering a project carries its tasks, files and orders along, so they stay
    attached and counted.
    """
    project = await _get_project(session, project_id)

    update_data = project_in.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("No valid fields provided for update.")

    logger.info(f"Updating project {project_id}: {update_data}")

    old_project_no = project.project_no
    new_project_no = update_data.get("project_no")
    if new_project_no is not None:
        new_project_no = sanitize_project_no(new_project_no)
        if not new_project_no:
            raise BadRequestError("Project Number is required", field="project_no")
        update_data["project_no"] = new_project_no

    if new_project_no and new_project_no != old_project_no:
        clash = await session.execute(
            select(Project.id).where(Project.project_no == new_project_no)
        )
        if clash.first() is not None:
            raise ConflictError(f"Project Number '{new_project_no}' already exists.")

        for model in TASK_MODELS.values():
            await session.execute(
                update(model)
                .where(model.project_no == old_project_no)
                .values(project_no=new_project_no)
            )
        await session.execute(
            update(ProjectFile)
            .where(ProjectFile.project_no == old_project_no)
            .values(project_no=new_project_no)
        )
        await session.execute(
            update(Order)
            .where(Order.project_no == old_project_no)
            .values(project_no=new_project_no)
        )
        logger.info(f"Renumbered project {old_project_no} -> {new_project_no}")

    for field, value in update_data.items():
        setattr(project, field, value)

    project.updated_at = datetime.utcnow()
    await session.flush()
    await session.refresh(project)

    await log_activity(
        session, "UPDATE", "PROJECT", project.id,
        f"Project {project.project_no} updated.",
        {"fields_updated": sorted(update_data)},
    )
    return project


@router.patch("/{project_id}/status", response_model=ProjectRead)
async def update_project_status(
    project_id: int,
    status_in: ProjectStatusUpdate,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """Move a project to a new workflow status."""
    if not status_in.status.strip():
        raise BadRequestError("Status is required.", field="status")

    project = await _get_project(session, project_id)
    old_status = project.status

    project.status = status_in.status
    project.updated_at = datetime.utcnow()
    await session.flush()
    await session.refresh(project)

    await log_activity(
        session, "UPDATE", "PROJECT", project.id,
        f"Project {project.project_no} status updated to {project.status}.",
        {"old_status": old_status, "new_status": project.status},
    )
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    session: AsyncSession = Depends(get_session),
) -> None:
    """Delete a project together with its files, orders and tasks in every category."""
    project = await _get_project(session, project_id)
    project_no = project.project_no

    logger.info(f"Deleting project {project_id}: '{project_no}'")

    await session.execute(delete(ProjectFile).where(ProjectFile.project_no == project_no))
    await session.execute(delete(Order).where(Order.project_no == project_no))
    for category in Category:
        model = TASK_MODELS[category]
        result = await session.execute(delete(model).where(model.project_no == project_no))
        if result.rowcount:
            logger.debug(f"Removed {result.rowcount} {category.value} task(s) of project {project_no}")

    await session.delete(project)
    await session.flush()

    await log_activity(
        session, "DELETE", "PROJECT", project_id,
        f"Project {project_no} for {project.customer} and all associated files deleted.",
        {"project_no": project_no, "customer": project.customer},
    )
