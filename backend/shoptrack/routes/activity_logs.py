"""
Activity log routes for the Shoptrack API.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from shoptrack.database import get_session
from shoptrack.models import ActivityLog
from shoptrack.schemas import ActivityLogRead

router = APIRouter()


@router.get("/", response_model=list[ActivityLogRead])
async def list_activity_logs(
    user_id: int | None = None,
    activity_type: str | None = None,
    resource_type: str | None = None,
    resource_id: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> list[ActivityLog]:
    """List activity, newest first, with optional filters and paging."""
    query = select(ActivityLog)
    if user_id is not None:
        query = query.where(ActivityLog.user_id == user_id)
    if activity_type:
        query = query.where(ActivityLog.activity_type == activity_type)
    if resource_type:
        query = query.where(ActivityLog.resource_type == resource_type)
    if resource_id:
        query = query.where(ActivityLog.resource_id == resource_id)
    if start_date:
        query = query.where(ActivityLog.timestamp >= start_date)
    if end_date:
        query = query.where(ActivityLog.timestamp <= end_date)

    query = query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
    query = query.limit(limit).offset(offset)

    result = await session.execute(query)
    return list(result.scalars().all())
