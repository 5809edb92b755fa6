#!/usr/bin/env python3
"""
Seed script to generate demo projects with tasks in every category.

Tasks are created through the task service, so the counter columns come
out consistent with the task rows. --drift then corrupts a few counters on
purpose, which is handy for trying the reconcile endpoint and script.

Usage:
    python -m scripts.seed [--projects 5] [--tasks 20] [--clear] [--drift]

Options:
    --projects N   Number of projects to create (default: 5)
    --tasks N      Tasks per project, spread over categories (default: 20)
    --clear        Clear existing data before seeding
    --drift        Knock some counters off afterwards
"""

import argparse
import asyncio
import random
import time
from datetime import date, timedelta

from sqlalchemy import delete, update

from shoptrack.database import async_session_maker, init_db
from shoptrack.models import (
    ActivityLog, Category, CounterKind, Project, ProjectFile, Subtask, TASK_MODELS,
)
from shoptrack.schemas import TaskCreate
from shoptrack.services.counters import counter_column
from shoptrack.services.tasks import create_task

CUSTOMERS = ["Polar Foods", "Northwind Cold Chain", "Harbor Seafood", "Greenleaf Produce", "Metro Dairy"]
STATUSES = ["pending", "pending", "in progress", "completed", "Completed", "done"]
PRIORITIES = ["low", "medium", "high"]


async def clear_data():
    """Clear all existing data."""
    print("Clearing existing data...")
    async with async_session_maker() as session:
        for model in TASK_MODELS.values():
            await session.execute(delete(model))
        for model in (ProjectFile, Subtask, ActivityLog, Project):
            await session.execute(delete(model))
        await session.commit()
    print("Data cleared.")


async def seed_project(index: int, num_tasks: int) -> Project:
    """Create one project and its tasks in a single transaction."""
    async with async_session_maker() as session:
        project = Project(
            project_no=f"DEMO-{date.today():%y%m}-{index:03d}",
            project_name=f"Cold room {index}",
            customer=random.choice(CUSTOMERS),
            drawing_date=date.today() - timedelta(days=random.randint(5, 60)),
            requested_delivery=date.today() + timedelta(days=random.randint(14, 90)),
            status=random.choice(["active", "Active", "Approved"]),
        )
        session.add(project)
        await session.flush()

        categories = list(Category)
        for n in range(num_tasks):
            category = categories[n % len(categories)]
            await create_task(session, category, TaskCreate(
                title=f"{category.label} item {n + 1}",
                project_no=project.project_no,
                priority=random.choice(PRIORITIES),
                status=random.choice(STATUSES),
                due_date=project.requested_delivery,
            ))

        await session.commit()
        await session.refresh(project)
        return project


async def add_drift(project_nos: list[str]):
    """Bump random counters so reconciliation has something to fix."""
    async with async_session_maker() as session:
        for project_no in project_nos:
            category = random.choice(list(Category))
            kind = random.choice(list(CounterKind))
            column = counter_column(category, kind)
            await session.execute(
                update(Project)
                .where(Project.project_no == project_no)
                .values({column.key: column + random.choice([-2, -1, 1, 3])})
            )
            print(f"  Drifted {column.key} on {project_no}")
        await session.commit()


async def main():
    parser = argparse.ArgumentParser(description="Seed the database with demo projects and tasks")
    parser.add_argument("--projects", type=int, default=5, help="Number of projects to create")
    parser.add_argument("--tasks", type=int, default=20, help="Tasks per project")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")
    parser.add_argument("--drift", action="store_true", help="Corrupt some counters after seeding")

    args = parser.parse_args()

    print("=== Shoptrack Seed Script ===")

    await init_db()

    if args.clear:
        await clear_data()

    start_time = time.time()
    project_nos = []
    for index in range(1, args.projects + 1):
        project = await seed_project(index, args.tasks)
        project_nos.append(project.project_no)
        print(f"Created project {project.project_no} ({project.customer}) with {args.tasks} tasks")
    print(f"Seed time: {time.time() - start_time:.2f}s")

    if args.drift:
        await add_drift(project_nos)

    print("\n=== Seeding Complete ===")


if __name__ == "__main__":
    asyncio.run(main())
