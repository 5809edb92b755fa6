"""
Shoptrack - fabrication-shop project tracker with per-category task counters.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shoptrack.config import get_settings
from shoptrack.database import init_db
from shoptrack.models import Category
from shoptrack.routes import projects, files, activity_logs, subtasks, orders
from shoptrack.routes.tasks import build_task_router
from shoptrack.exceptions import register_exception_handlers
from shoptrack.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Shoptrack API...")
    await init_db()
    logger.info("Database initialized")
    yield
    logger.info("Shutting down Shoptrack API...")


app = FastAPI(
    title="Shoptrack",
    description="Fabrication-shop project tracker with task completion counters",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# Register custom exception handlers
register_exception_handlers(app)

# Include routers; file routes share the /api/projects prefix and go first
app.include_router(files.router, prefix="/api/projects", tags=["Files"])
app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
for category in Category:
    app.include_router(
        build_task_router(category),
        prefix=f"/api/{category.slug}-tasks",
        tags=[f"{category.label} Tasks"],
    )
app.include_router(activity_logs.router, prefix="/api/activity-logs", tags=["Activity Logs"])
app.include_router(subtasks.router, prefix="/api/subtasks", tags=["Subtasks"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
