"""
Task status classification.

Two vocabularies are in use and both live here so they cannot drift apart
silently:

- COUNTED_COMPLETED_STATUSES drives the counter store (total_* / completed_*
  columns). Only "completed" counts.
- DISPLAY_COMPLETED_STATUSES drives completion percentages shown to users,
  which also treat "done" as finished.

All comparisons are case-insensitive. Stored statuses keep the casing the
client sent ("Completed" stays "Completed").
"""

from typing import Optional

COUNTED_COMPLETED_STATUSES: frozenset[str] = frozenset({"completed"})
DISPLAY_COMPLETED_STATUSES: frozenset[str] = frozenset({"completed", "done"})

DEFAULT_TASK_STATUS = "pending"


def normalize_status(status: Optional[str]) -> str:
    return (status or "").strip().lower()


def is_counted_completed(status: Optional[str]) -> bool:
    """True if the task contributes to its project's completed_* counter."""
    return normalize_status(status) in COUNTED_COMPLETED_STATUSES


def is_display_completed(status: Optional[str]) -> bool:
    """True if the task counts as finished in completion percentages."""
    return normalize_status(status) in DISPLAY_COMPLETED_STATUSES
