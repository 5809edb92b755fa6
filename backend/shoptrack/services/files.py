"""
Project file attachments.

Uploading into a task category creates one task per file through the task
service, so the counter store sees the same increments as a task created
through the API. Deleting such a file deletes its task the same way.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from shoptrack.config import get_settings
from shoptrack.exceptions import BadRequestError, NotFoundError
from shoptrack.logging_config import get_logger
from shoptrack.models import Category, Project, ProjectFile
from shoptrack.schemas import TaskCreate
from shoptrack.services.activity import log_activity
from shoptrack.services.tasks import create_task, delete_task

logger = get_logger(__name__)


@dataclass
class IncomingFile:
    """An uploaded file already read into memory."""
    file_name: str
    content_type: str | None
    data: bytes


@dataclass
class UploadOutcome:
    files: list[ProjectFile]
    tasks_created: int
    last_task_id: int | None


def parse_category(value: str | None) -> Category | None:
    """Known category, or None for uncategorised / unknown values."""
    if not value:
        return None
    try:
        return Category(value)
    except ValueError:
        return None


async def get_project_by_no(session: AsyncSession, project_no: str) -> Project:
    result = await session.execute(select(Project).where(Project.project_no == project_no))
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError("Project", project_no)
    return project


async def store_uploads(
    session: AsyncSession,
    project_no: str,
    category: str | None,
    uploads: list[IncomingFile],
) -> UploadOutcome:
    """
    Store uploaded files for a project.

    Empty or oversized files are skipped. When the category names a task
    category, a pending task is created for each stored file and linked to
    it.
    """
    if not uploads:
        raise BadRequestError("No files selected for upload.", field="files")

    project = await get_project_by_no(session, project_no)
    task_category = parse_category(category)
    max_bytes = get_settings().max_upload_bytes

    stored: list[ProjectFile] = []
    tasks_created = 0
    last_task_id = None

    for upload in uploads:
        if not upload.data:
            logger.warning(f"Skipping empty file '{upload.file_name}' for project {project_no}")
            continue
        if len(upload.data) > max_bytes:
            logger.warning(
                f"Skipping '{upload.file_name}' for project {project_no}: "
                f"{len(upload.data)} bytes exceeds limit of {max_bytes}"
            )
            continue

        project_file = ProjectFile(
            project_no=project_no,
            file_name=upload.file_name,
            file_size=len(upload.data),
            mime_type=upload.content_type,
            file_data=upload.data,
            category=category or None,
        )
        session.add(project_file)
        await session.flush()

        if task_category is not None:
            task = await create_task(session, task_category, TaskCreate(
                title=f"{task_category.label} Task: {upload.file_name}",
                description=f"File '{upload.file_name}' uploaded for project {project_no}.",
                priority="empty",
                status="pending",
                project_no=project_no,
                due_date=project.requested_delivery,
                approve_status="Approved" if project.status == "Approved" else "Pending",
            ))
            project_file.task_id = task.id
            tasks_created += 1
            last_task_id = task.id
            logger.debug(f"Linked task {task.id} to file {project_file.id}")

        stored.append(project_file)

    await session.flush()

    if stored:
        names = ", ".join(f.file_name for f in stored)
        where = f" to {category} category" if category else ""
        await log_activity(
            session,
            "UPLOAD",
            "FILE",
            project.id,
            f"{len(stored)} file(s) uploaded{where} for project {project_no}: {names}. "
            f"{tasks_created} task(s) created.",
            {
                "project_no": project_no,
                "customer": project.customer,
                "count": len(stored),
                "category": category or "uncategorized",
                "tasks_created": tasks_created,
                "last_task_id": last_task_id,
            },
        )

    logger.info(f"Stored {len(stored)} of {len(uploads)} file(s) for project {project_no}")
    return UploadOutcome(files=stored, tasks_created=tasks_created, last_task_id=last_task_id)


async def list_files(
    session: AsyncSession,
    project_no: str,
    category: str | None = None,
) -> list[ProjectFile]:
    query = select(ProjectFile).where(ProjectFile.project_no == project_no)
    if category and category != "all":
        query = query.where(ProjectFile.category == category)
    query = query.order_by(ProjectFile.id)

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_file(session: AsyncSession, file_id: int) -> ProjectFile:
    project_file = await session.get(ProjectFile, file_id)
    if not project_file:
        raise NotFoundError("File", file_id)
    return project_file


async def delete_file(session: AsyncSession, file_id: int) -> bool:
    """
    Delete a file and the task created for it, if that task still exists.

    Returns:
        True if a linked task was deleted.
    """
    project_file = await get_file(session, file_id)
    file_name = project_file.file_name
    project_no = project_file.project_no
    category = project_file.category
    task_id = project_file.task_id

    await session.delete(project_file)
    await session.flush()

    task_deleted = False
    task_category = parse_category(category)
    if task_category is not None and task_id is not None:
        try:
            await delete_task(session, task_category, task_id)
            task_deleted = True
        except NotFoundError:
            logger.warning(
                f"File {file_id} deleted but linked {task_category.value} task {task_id} "
                "was already gone"
            )

    await log_activity(
        session,
        "DELETE",
        "FILE",
        file_id,
        f"Deleted file '{file_name}' from project {project_no} "
        f"(category: {category or 'N/A'}, linked task: {task_id or 'N/A'}).",
        {"project_no": project_no, "category": category, "task_deleted": task_deleted, "task_id": task_id},
    )
    return task_deleted
