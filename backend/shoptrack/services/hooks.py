"""
Task lifecycle hooks.

Turns a task's state before and after a mutation into the counter changes
that keep the project counter store equal to the live task rows:

    create            total +1, completed +1 if created completed
    status change     completed +/-1 on the same project
    project move      old project loses the task, new project gains it
    delete            total -1, completed -1 if it was completed

Planning is a pure function so the rules can be tested without a database.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shoptrack.models import Category, CounterKind
from shoptrack.services.counters import adjust_count
from shoptrack.services.status import is_counted_completed


@dataclass(frozen=True)
class TaskState:
    """The parts of a task row that matter to the counter store."""
    project_no: str
    status: Optional[str]

    @property
    def completed(self) -> bool:
        return is_counted_completed(self.status)


@dataclass(frozen=True)
class CounterChange:
    project_no: str
    category: Category
    kind: CounterKind
    delta: int


def _leave(category: Category, state: TaskState) -> list[CounterChange]:
    changes = [CounterChange(state.project_no, category, CounterKind.TOTAL, -1)]
    if state.completed:
        changes.append(CounterChange(state.project_no, category, CounterKind.COMPLETED, -1))
    return changes


def _join(category: Category, state: TaskState) -> list[CounterChange]:
    changes = [CounterChange(state.project_no, category, CounterKind.TOTAL, 1)]
    if state.completed:
        changes.append(CounterChange(state.project_no, category, CounterKind.COMPLETED, 1))
    return changes


def plan_counter_changes(
    category: Category,
    before: Optional[TaskState],
    after: Optional[TaskState],
) -> list[CounterChange]:
    """
    Counter changes implied by a task going from `before` to `after`.

    Args:
        category: The task's category
        before: State prior to the mutation, None for a create
        after: State after the mutation, None for a delete

    Returns:
        Changes in the order they should be applied
    """
    if before is None and after is None:
        return []
    if before is None:
        return _join(category, after)
    if after is None:
        return _leave(category, before)

    if before.project_no != after.project_no:
        return _leave(category, before) + _join(category, after)

    if after.completed and not before.completed:
        return [CounterChange(after.project_no, category, CounterKind.COMPLETED, 1)]
    if before.completed and not after.completed:
        return [CounterChange(after.project_no, category, CounterKind.COMPLETED, -1)]
    return []


async def apply_counter_changes(
    session: AsyncSession,
    changes: list[CounterChange],
) -> int:
    """Apply changes in order. Returns how many took effect."""
    applied = 0
    for change in changes:
        if await adjust_count(
            session, change.project_no, change.category, change.kind, change.delta
        ):
            applied += 1
    return applied


async def sync_counters(
    session: AsyncSession,
    category: Category,
    before: Optional[TaskState],
    after: Optional[TaskState],
) -> int:
    return await apply_counter_changes(
        session, plan_counter_changes(category, before, after)
    )
