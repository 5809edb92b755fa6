"""
Completion aggregation and counter reconciliation.

calculate_completion counts live task rows per category on every call and
never reads the counter store, which makes it usable as a check on it:
reconcile_project_counters recomputes the counters the same way and writes
them back, reporting any drift it corrected.
"""

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shoptrack.exceptions import CompletionError, NotFoundError
from shoptrack.logging_config import get_logger
from shoptrack.models import Category, CounterKind, Project, task_model_for
from shoptrack.schemas.completion import CategoryCompletion, CounterDrift, ReconcileResult
from shoptrack.services.counters import counter_column, read_counter
from shoptrack.services.status import (
    COUNTED_COMPLETED_STATUSES,
    DISPLAY_COMPLETED_STATUSES,
)

logger = get_logger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    """
    Whole-number percentage, rounded half up. 0 when there are no tasks.

    Integer arithmetic: 1/3 -> 33, 2/3 -> 67, 1/8 -> 13.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def empty_completion() -> dict[str, CategoryCompletion]:
    return {category.value: CategoryCompletion() for category in Category}


async def count_category(
    session: AsyncSession,
    category: Category,
    project_no: str,
    completed_statuses: frozenset[str],
) -> tuple[int, int]:
    """
    Count a project's tasks in one category.

    Returns:
        (completed, total)
    """
    model = task_model_for(category)
    completed_expr = func.sum(
        case((func.lower(model.status).in_(sorted(completed_statuses)), 1), else_=0)
    )
    query = select(
        func.count(model.id),
        func.coalesce(completed_expr, 0),
    ).where(model.project_no == project_no)

    result = await session.execute(query)
    total, completed = result.one()
    return int(completed or 0), int(total or 0)


async def calculate_completion(
    session: AsyncSession,
    project_no: str,
) -> dict[str, CategoryCompletion]:
    """
    Completion per category for a project, keyed by category value.

    All-or-nothing: if any category query fails the whole call raises
    CompletionError.
    """
    completion: dict[str, CategoryCompletion] = {}
    for category in Category:
        try:
            completed, total = await count_category(
                session, category, project_no, DISPLAY_COMPLETED_STATUSES
            )
        except SQLAlchemyError as e:
            logger.error(f"Completion query failed for project {project_no} ({category.value}): {e}")
            raise CompletionError(project_no, category.value) from e

        completion[category.value] = CategoryCompletion(
            completed=completed,
            total=total,
            percentage=completion_percentage(completed, total),
        )
    return completion


async def calculate_completion_or_empty(
    session: AsyncSession,
    project_no: str,
) -> dict[str, CategoryCompletion]:
    """
    calculate_completion for list views: a failure degrades to zeros
    instead of failing the whole listing.
    """
    try:
        async with session.begin_nested():
            return await calculate_completion(session, project_no)
    except CompletionError:
        logger.warning(f"Using empty completion for project {project_no}")
        return empty_completion()


def lock_project(project_no: str):
    """SELECT of one project row with FOR UPDATE, bypassing the identity map."""
    return (
        select(Project)
        .where(Project.project_no == project_no)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def reconcile_project_counters(
    session: AsyncSession,
    project_no: str,
) -> ReconcileResult:
    """
    Recompute every counter column of a project from its task rows.

    Uses the counter vocabulary (only "completed" counts), so after a
    reconcile the counters match what the lifecycle hooks would have
    produced from an empty start.

    The project row stays locked until the caller commits. A concurrent
    counter UPDATE waits for the lock and then applies its step on top of
    the recomputed value instead of being overwritten by it.
    """
    result = await session.execute(lock_project(project_no))
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError("Project", project_no)

    drift: list[CounterDrift] = []
    for category in Category:
        completed, total = await count_category(
            session, category, project_no, COUNTED_COMPLETED_STATUSES
        )
        for kind, actual in ((CounterKind.TOTAL, total), (CounterKind.COMPLETED, completed)):
            stored = read_counter(project, category, kind)
            if stored != actual:
                drift.append(CounterDrift(
                    column=counter_column(category, kind).key,
                    stored=stored,
                    actual=actual,
                ))
                setattr(project, counter_column(category, kind).key, actual)

    if drift:
        await session.flush()
        logger.warning(
            f"Corrected {len(drift)} drifted counter(s) on project {project_no}: "
            + ", ".join(f"{d.column} {d.stored}->{d.actual}" for d in drift)
        )
    else:
        logger.debug(f"Counters consistent for project {project_no}")

    return ReconcileResult(project_no=project_no, drift=drift)


async def list_project_numbers(session: AsyncSession) -> list[str]:
    result = await session.execute(select(Project.project_no).order_by(Project.id))
    return list(result.scalars().all())


async def reconcile_all_projects(session: AsyncSession) -> list[ReconcileResult]:
    """
    Reconcile every project in one transaction. Returns only the projects
    that had drift.

    Every project row stays locked until the caller commits; the worker
    reconciles project by project instead.
    """
    project_nos = await list_project_numbers(session)

    corrected = []
    for project_no in project_nos:
        outcome = await reconcile_project_counters(session, project_no)
        if outcome.drift:
            corrected.append(outcome)

    logger.info(f"Reconciled {len(project_nos)} projects, {len(corrected)} had drift")
    return corrected
