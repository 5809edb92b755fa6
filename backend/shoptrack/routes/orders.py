"""
Order routes for the Shoptrack API.

An order lists the materials needed for one category task. Orders refer to
their task by ID only and do not touch the project counters.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from shoptrack.database import get_session
from shoptrack.models import Order
from shoptrack.schemas import OrderCreate, OrderStatusUpdate, OrderRead
from shoptrack.services.status import DEFAULT_TASK_STATUS
from shoptrack.exceptions import BadRequestError, NotFoundError
from shoptrack.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_ORDER_CATEGORY = "Accessories"


async def _get_order(session: AsyncSession, order_id: int) -> Order:
    order = await session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreate,
    session: AsyncSession = Depends(get_session),
) -> Order:
    """
    Create an order for a task.

    Status defaults to "pending" and category to "Accessories".
    """
    if not order_in.project_no.strip():
        raise BadRequestError("Project No is required", field="project_no")
    if not order_in.task_title.strip():
        raise BadRequestError("Task title is required", field="task_title")

    order = Order(
        task_id=order_in.task_id,
        project_no=order_in.project_no,
        task_title=order_in.task_title,
        items=[item.model_dump() for item in order_in.items],
        status=order_in.status or DEFAULT_TASK_STATUS,
        category=order_in.category or DEFAULT_ORDER_CATEGORY,
    )
    session.add(order)
    await session.flush()
    await session.refresh(order)

    logger.info(
        f"Created order {order.id} for task {order.task_id} "
        f"({len(order.items)} item(s), project {order.project_no})"
    )
    return order


@router.get("/", response_model=list[OrderRead])
async def list_orders(
    session: AsyncSession = Depends(get_session),
) -> list[Order]:
    result = await session.execute(
        select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())


@router.get("/task/{task_id}", response_model=list[OrderRead])
async def list_orders_for_task(
    task_id: int,
    session: AsyncSession = Depends(get_session),
) -> list[Order]:
    result = await session.execute(
        select(Order)
        .where(Order.task_id == task_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())


@router.put("/{order_id}", response_model=OrderRead)
async def update_order_status(
    order_id: int,
    status_in: OrderStatusUpdate,
    session: AsyncSession = Depends(get_session),
) -> Order:
    """Change an order's status. Items are fixed once ordered."""
    if not status_in.status.strip():
        raise BadRequestError("Status is required", field="status")

    order = await _get_order(session, order_id)
    order.status = status_in.status
    order.updated_at = datetime.utcnow()
    await session.flush()
    await session.refresh(order)

    logger.info(f"Order {order_id} status -> {order.status}")
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    session: AsyncSession = Depends(get_session),
) -> None:
    order = await _get_order(session, order_id)
    await session.delete(order)
    logger.info(f"Deleted order {order_id}")
