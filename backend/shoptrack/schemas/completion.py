from pydantic import BaseModel


class CategoryCompletion(BaseModel):
    """Completion of one task category within a project."""
    completed: int = 0
    total: int = 0
    percentage: int = 0


class CounterDrift(BaseModel):
    """A counter column whose stored value disagreed with the task rows."""
    column: str
    stored: int
    actual: int


class ReconcileResult(BaseModel):
    project_no: str
    drift: list[CounterDrift] = []


class ReconcileQueued(BaseModel):
    project_no: str
    job_id: str | None
