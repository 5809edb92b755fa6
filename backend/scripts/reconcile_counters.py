#!/usr/bin/env python3
"""
Recompute project counter columns from the task tables.

Usage:
    python -m scripts.reconcile_counters [--project PROJECT_NO]

Without --project every project is checked. Drift is printed and written
back in one transaction.
"""

import argparse
import asyncio

from shoptrack.database import get_session_context
from shoptrack.logging_config import setup_logging
from shoptrack.services.completion import reconcile_all_projects, reconcile_project_counters


async def main():
    parser = argparse.ArgumentParser(description="Repair drifted project counters")
    parser.add_argument("--project", type=str, default=None, help="Only this project number")
    args = parser.parse_args()

    setup_logging()

    async with get_session_context() as session:
        if args.project:
            results = [await reconcile_project_counters(session, args.project)]
        else:
            results = await reconcile_all_projects(session)

    drifted = [r for r in results if r.drift]
    if not drifted:
        print("All counters consistent.")
        return

    for result in drifted:
        print(f"{result.project_no}:")
        for d in result.drift:
            print(f"  {d.column}: {d.stored} -> {d.actual}")


if __name__ == "__main__":
    asyncio.run(main())
