"""
Counter store maintenance.

Each project carries a total_<category> / completed_<category> column pair.
adjust_count moves one of them by one step with a single relative UPDATE,
so concurrent writers on the same row cannot lose increments.

Counter maintenance is never fatal to the task operation that triggered it:
failures are logged and reported as False. The statement runs in a
SAVEPOINT so a failed UPDATE does not poison the surrounding request
transaction.
"""

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shoptrack.models import Category, CounterKind, Project
from shoptrack.logging_config import get_logger

logger = get_logger(__name__)


COUNTER_COLUMNS = {
    (Category.PANEL, CounterKind.TOTAL): Project.total_panel,
    (Category.PANEL, CounterKind.COMPLETED): Project.completed_panel,
    (Category.DOOR, CounterKind.TOTAL): Project.total_door,
    (Category.DOOR, CounterKind.COMPLETED): Project.completed_door,
    (Category.CUTTING, CounterKind.TOTAL): Project.total_cutting,
    (Category.CUTTING, CounterKind.COMPLETED): Project.completed_cutting,
    (Category.ACCESSORIES, CounterKind.TOTAL): Project.total_accessories,
    (Category.ACCESSORIES, CounterKind.COMPLETED): Project.completed_accessories,
    (Category.STRIP_CURTAIN, CounterKind.TOTAL): Project.total_strip_curtain,
    (Category.STRIP_CURTAIN, CounterKind.COMPLETED): Project.completed_strip_curtain,
    (Category.SYSTEM, CounterKind.TOTAL): Project.total_system,
    (Category.SYSTEM, CounterKind.COMPLETED): Project.completed_system,
    (Category.TRANSPORTATION, CounterKind.TOTAL): Project.total_transportation,
    (Category.TRANSPORTATION, CounterKind.COMPLETED): Project.completed_transportation,
    (Category.QUOTATION, CounterKind.TOTAL): Project.total_quotation,
    (Category.QUOTATION, CounterKind.COMPLETED): Project.completed_quotation,
}


def counter_column(category: Category, kind: CounterKind):
    """Project column attribute holding the given counter."""
    return COUNTER_COLUMNS[(category, kind)]


def read_counter(project: Project, category: Category, kind: CounterKind) -> int:
    return getattr(project, counter_column(category, kind).key)


async def adjust_count(
    session: AsyncSession,
    project_no: str,
    category: Category,
    kind: CounterKind,
    delta: int,
) -> bool:
    """
    Add +1 or -1 to one counter column of one project.

    Any positive delta is applied as +1 and anything else as -1. The value
    is not clamped at zero.

    Returns:
        True if a project row was updated, False if no project matched or
        the statement failed.
    """
    step = 1 if delta > 0 else -1
    column = counter_column(category, kind)

    stmt = (
        update(Project)
        .where(Project.project_no == project_no)
        .values({column.key: column + step})
        .execution_options(synchronize_session=False)
    )

    try:
        async with session.begin_nested():
            result = await session.execute(stmt)
    except SQLAlchemyError as e:
        logger.error(
            f"Counter update failed: project={project_no} category={category.value} "
            f"counter={kind.value} delta={step:+d}: {e}"
        )
        return False

    if result.rowcount == 0:
        logger.warning(
            f"Counter not updated, project not found: project={project_no} "
            f"category={category.value} counter={kind.value} delta={step:+d}"
        )
        return False

    logger.debug(f"Adjusted {column.key} for project {project_no} by {step:+d}")
    return True
