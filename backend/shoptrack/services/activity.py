"""Activity log writer. Logging an activity never fails the request."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shoptrack.logging_config import get_logger
from shoptrack.models import ActivityLog

logger = get_logger(__name__)


async def log_activity(
    session: AsyncSession,
    activity_type: str,
    resource_type: str,
    resource_id: Any,
    message: str,
    details: dict[str, Any] | None = None,
    user_id: int | None = None,
) -> ActivityLog | None:
    """
    Record an activity in the caller's transaction.

    Args:
        activity_type: CREATE, UPDATE, DELETE or UPLOAD
        resource_type: PROJECT or FILE
        resource_id: ID of the affected row
        message: Human-readable description
        details: Extra JSON-serialisable context
        user_id: Acting user, when known

    Returns:
        The stored entry, or None if it could not be written.
    """
    entry = ActivityLog(
        user_id=user_id,
        activity_type=activity_type,
        resource_type=resource_type,
        resource_id=None if resource_id is None else str(resource_id),
        message=message,
        details=details or {},
    )
    try:
        async with session.begin_nested():
            session.add(entry)
            await session.flush()
    except SQLAlchemyError as e:
        logger.error(f"Activity logging failed ({activity_type} {resource_type} {resource_id}): {e}")
        return None
    return entry
