"""
Counter store tests against a real database session.

Verify that adjust_count is a safe no-op for unknown projects and that the
task service keeps the counters equal to the live task rows across any
sequence of creates, updates, moves and deletes.
"""

import random

import pytest
from sqlalchemy.exc import OperationalError

from shoptrack.models import Category, CounterKind, Project
from shoptrack.schemas import TaskCreate, TaskUpdate
from shoptrack.services import tasks as task_service
from shoptrack.services.counters import adjust_count, read_counter
from shoptrack.services.status import is_counted_completed


async def make_project(session, project_no: str) -> Project:
    project = Project(project_no=project_no, customer="Polar Foods")
    session.add(project)
    await session.flush()
    return project


async def live_counts(session, category: Category, project_no: str) -> tuple[int, int]:
    tasks = await task_service.list_tasks(session, category, project_no=project_no)
    return len(tasks), sum(1 for t in tasks if is_counted_completed(t.status))


class TestAdjustCount:
    async def test_increment_and_decrement(self, test_session, load_project):
        await make_project(test_session, "P-100")

        assert await adjust_count(test_session, "P-100", Category.DOOR, CounterKind.TOTAL, 1)
        assert await adjust_count(test_session, "P-100", Category.DOOR, CounterKind.TOTAL, 1)
        assert await adjust_count(test_session, "P-100", Category.DOOR, CounterKind.TOTAL, -1)

        project = await load_project(test_session, "P-100")
        assert project.total_door == 1
        assert project.completed_door == 0

    async def test_delta_is_normalised_to_one_step(self, test_session, load_project):
        await make_project(test_session, "P-101")

        await adjust_count(test_session, "P-101", Category.PANEL, CounterKind.COMPLETED, 5)
        await adjust_count(test_session, "P-101", Category.PANEL, CounterKind.TOTAL, -7)

        project = await load_project(test_session, "P-101")
        assert project.completed_panel == 1
        assert project.total_panel == -1  # not clamped at zero

    async def test_unknown_project_is_a_logged_no_op(self, test_session, load_project, caplog):
        await make_project(test_session, "P-102")

        applied = await adjust_count(test_session, "NOPE", Category.PANEL, CounterKind.TOTAL, 1)

        assert applied is False
        assert "project not found" in caplog.text
        project = await load_project(test_session, "P-102")
        assert project.total_panel == 0

    async def test_database_error_is_swallowed(self, test_session, monkeypatch, caplog):
        await make_project(test_session, "P-103")

        async def broken_execute(*args, **kwargs):
            raise OperationalError("UPDATE projects", {}, Exception("connection lost"))

        monkeypatch.setattr(test_session, "execute", broken_execute)

        applied = await adjust_count(test_session, "P-103", Category.SYSTEM, CounterKind.TOTAL, 1)

        assert applied is False
        assert "Counter update failed" in caplog.text
        assert "P-103" in caplog.text


class TestTaskLifecycle:
    async def test_create_update_delete_cycle(self, test_session, load_project):
        await make_project(test_session, "P-200")

        task = await task_service.create_task(
            test_session, Category.CUTTING, TaskCreate(title="Cut panels", project_no="P-200")
        )
        assert task.status == "pending"
        project = await load_project(test_session, "P-200")
        assert (project.total_cutting, project.completed_cutting) == (1, 0)

        await task_service.update_task(
            test_session, Category.CUTTING, task.id, TaskUpdate(status="Completed")
        )
        project = await load_project(test_session, "P-200")
        assert (project.total_cutting, project.completed_cutting) == (1, 1)

        # Title-only update keeps the inherited status
        await task_service.update_task(
            test_session, Category.CUTTING, task.id, TaskUpdate(title="Cut all panels")
        )
        project = await load_project(test_session, "P-200")
        assert (project.total_cutting, project.completed_cutting) == (1, 1)

        await task_service.delete_task(test_session, Category.CUTTING, task.id)
        project = await load_project(test_session, "P-200")
        assert (project.total_cutting, project.completed_cutting) == (0, 0)

    async def test_move_between_projects(self, test_session, load_project):
        await make_project(test_session, "A-1")
        await make_project(test_session, "B-1")

        task = await task_service.create_task(
            test_session, Category.PANEL,
            TaskCreate(title="Wall panel", project_no="A-1", status="completed"),
        )
        await task_service.update_task(
            test_session, Category.PANEL, task.id, TaskUpdate(project_no="B-1")
        )

        a = await load_project(test_session, "A-1")
        b = await load_project(test_session, "B-1")
        assert (a.total_panel, a.completed_panel) == (0, 0)
        assert (b.total_panel, b.completed_panel) == (1, 1)

    async def test_task_for_missing_project_still_created(self, test_session):
        task = await task_service.create_task(
            test_session, Category.DOOR, TaskCreate(title="Orphan", project_no="GHOST")
        )
        assert task.id is not None

    async def test_counters_track_rows_through_random_operations(self, test_session, load_project):
        """After every operation each counter equals the live row count."""
        rng = random.Random(20261016)
        project_nos = ["R-1", "R-2", "R-3"]
        for project_no in project_nos:
            await make_project(test_session, project_no)

        categories = [Category.PANEL, Category.STRIP_CURTAIN]
        statuses = ["pending", "in progress", "completed", "Completed", "done"]
        live: dict[Category, list[int]] = {c: [] for c in categories}

        for step in range(60):
            category = rng.choice(categories)
            op = rng.choice(["create", "create", "status", "move", "delete"])

            if op == "create" or not live[category]:
                task = await task_service.create_task(test_session, category, TaskCreate(
                    title=f"task {step}",
                    project_no=rng.choice(project_nos),
                    status=rng.choice(statuses),
                ))
                live[category].append(task.id)
            elif op == "status":
                await task_service.update_task(
                    test_session, category, rng.choice(live[category]),
                    TaskUpdate(status=rng.choice(statuses)),
                )
            elif op == "move":
                await task_service.update_task(
                    test_session, category, rng.choice(live[category]),
                    TaskUpdate(project_no=rng.choice(project_nos), status=rng.choice(statuses)),
                )
            else:
                task_id = rng.choice(live[category])
                live[category].remove(task_id)
                await task_service.delete_task(test_session, category, task_id)

            for project_no in project_nos:
                project = await load_project(test_session, project_no)
                for c in categories:
                    total, completed = await live_counts(test_session, c, project_no)
                    assert read_counter(project, c, CounterKind.TOTAL) == total, (step, op)
                    assert read_counter(project, c, CounterKind.COMPLETED) == completed, (step, op)

    async def test_update_with_empty_body_rejected(self, test_session):
        from shoptrack.exceptions import BadRequestError

        await make_project(test_session, "P-300")
        task = await task_service.create_task(
            test_session, Category.SYSTEM, TaskCreate(title="Wire", project_no="P-300")
        )
        with pytest.raises(BadRequestError):
            await task_service.update_task(test_session, Category.SYSTEM, task.id, TaskUpdate())
