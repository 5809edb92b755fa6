"""
ARQ Worker for background counter maintenance.

This worker handles:
- reconcile_project: Recompute one project's counters from its task rows
- reconcile_all: Nightly sweep over every project (cron)

Usage:
    arq shoptrack.worker.WorkerSettings
"""

from arq import create_pool, cron
from arq.connections import RedisSettings, ArqRedis

from shoptrack.config import get_settings
from shoptrack.database import get_session_context
from shoptrack.services.completion import list_project_numbers, reconcile_project_counters
from shoptrack.logging_config import setup_logging, get_logger

# Initialize logging for the worker
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


def parse_redis_url(url: str) -> RedisSettings:
    """Parse redis URL into RedisSettings."""
    return RedisSettings.from_dsn(url)


async def reconcile_project(ctx: dict, project_no: str) -> str:
    """ARQ job: repair counter drift for one project."""
    async with get_session_context() as session:
        result = await reconcile_project_counters(session, project_no)
    if not result.drift:
        return f"Project {project_no}: counters consistent"
    return f"Project {project_no}: corrected {len(result.drift)} counter(s)"


async def reconcile_all(ctx: dict) -> str:
    """
    ARQ cron job: repair counter drift across all projects.

    Each project is reconciled and committed on its own, so its row lock is
    held only while that project is recounted.
    """
    async with get_session_context() as session:
        project_nos = await list_project_numbers(session)

    corrected = 0
    for project_no in project_nos:
        async with get_session_context() as session:
            result = await reconcile_project_counters(session, project_no)
        if result.drift:
            corrected += 1

    logger.info(f"Nightly reconcile: {corrected} of {len(project_nos)} project(s) had drift")
    return f"Corrected drift on {corrected} project(s)"


async def startup(ctx: dict) -> None:
    logger.info("ARQ Worker starting up...")
    logger.info(f"Redis: {settings.redis_url}")


async def shutdown(ctx: dict) -> None:
    logger.info("ARQ Worker shutting down...")


class WorkerSettings:
    """ARQ Worker configuration."""

    functions = [reconcile_project]
    cron_jobs = [cron(reconcile_all, hour=settings.reconcile_cron_hour, minute=0)]
    on_startup = startup
    on_shutdown = shutdown
    redis_settings = parse_redis_url(settings.redis_url)
    max_jobs = 10
    job_timeout = 300  # 5 minutes max per job


# Redis pool for enqueuing jobs from the API
_arq_pool: ArqRedis | None = None


async def get_arq_pool() -> ArqRedis:
    """Get or create the ARQ Redis pool for enqueuing jobs."""
    global _arq_pool
    if _arq_pool is None:
        logger.debug("Creating ARQ Redis pool")
        _arq_pool = await create_pool(parse_redis_url(settings.redis_url))
    return _arq_pool


async def enqueue_reconcile(project_no: str) -> str | None:
    """Enqueue a counter reconciliation for a project. Returns the job ID."""
    pool = await get_arq_pool()
    logger.debug(f"Enqueuing reconcile job: project={project_no}")
    job = await pool.enqueue_job("reconcile_project", project_no)
    return job.job_id if job else None
