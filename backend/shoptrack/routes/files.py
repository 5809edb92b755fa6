"""
Project file routes for the Shoptrack API.

Mounted under /api/projects alongside the project routes.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from shoptrack.database import get_session
from shoptrack.models import ProjectFile
from shoptrack.schemas import ProjectFileRead, UploadResult, FileDeleteResult
from shoptrack.services import files as file_service
from shoptrack.exceptions import NotFoundError
from shoptrack.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/upload", response_model=UploadResult)
async def upload_files(
    project_no: str = Form(...),
    category: str | None = Form(None),
    files: list[UploadFile] = File(...),
    session: AsyncSession = Depends(get_session),
) -> UploadResult:
    """
    Upload files to a project.

    With a task category (panel, door, cutting, ...) each stored file also
    gets a pending task in that category, counted on the project.
    """
    incoming = [
        file_service.IncomingFile(
            file_name=upload.filename or "upload",
            content_type=upload.content_type,
            data=await upload.read(),
        )
        for upload in files
    ]

    outcome = await file_service.store_uploads(session, project_no, category, incoming)
    if not outcome.files:
        logger.warning(f"No usable files in upload for project {project_no}")

    message = f"{len(outcome.files)} file(s) uploaded to {category or 'database'} for project {project_no}."
    if outcome.tasks_created:
        message += f" {outcome.tasks_created} corresponding task(s) created and linked."

    return UploadResult(
        message=message,
        category=category,
        count=len(outcome.files),
        tasks_created=outcome.tasks_created,
        last_task_id=outcome.last_task_id,
        files=[ProjectFileRead.model_validate(f) for f in outcome.files],
    )


@router.get("/{project_no}/files", response_model=list[ProjectFileRead])
async def list_project_files(
    project_no: str,
    category: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[ProjectFile]:
    """List file metadata for a project. category=all disables the filter."""
    return await file_service.list_files(session, project_no, category)


@router.get("/file/blob/{file_id}")
async def get_file_blob(
    file_id: int,
    session: AsyncSession = Depends(get_session),
) -> Response:
    """Serve a stored file's bytes inline."""
    project_file = await file_service.get_file(session, file_id)
    if not project_file.file_data:
        raise NotFoundError("File data", file_id)

    return Response(
        content=project_file.file_data,
        media_type=project_file.mime_type or "application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{project_file.file_name}"'},
    )


@router.delete("/file/{file_id}", response_model=FileDeleteResult)
async def delete_project_file(
    file_id: int,
    session: AsyncSession = Depends(get_session),
) -> FileDeleteResult:
    """Delete a file and, if it created one, its task."""
    project_file = await file_service.get_file(session, file_id)
    file_name = project_file.file_name
    task_id = project_file.task_id

    task_deleted = await file_service.delete_file(session, file_id)

    message = f"File deleted successfully. (File: {file_name})"
    if task_deleted:
        message += f" The corresponding task (ID: {task_id}) was also deleted."
    elif task_id:
        message += f" Linked task {task_id} could not be deleted (may have been deleted previously)."

    return FileDeleteResult(
        message=message,
        file_id=file_id,
        task_deleted=task_deleted,
        task_id=task_id,
    )
