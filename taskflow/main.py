"""TaskFlow API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskFlowError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, event bus and notification fan-out started via the lifespan and
      stopped in reverse order

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers: TaskFlowError (domain), RequestValidationError
      (Pydantic), Exception (catch-all) — never leaks internal details
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow.api.error_handlers import register_error_handlers
from taskflow.api.routes import (
    auth, comments, dashboard, health, notifications, projects, tasks, users,
)
from taskflow.config import get_settings
from taskflow.infrastructure import database
from taskflow.infrastructure.observability import setup_logging
from taskflow.infrastructure.runtime import build_runtime

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    runtime = build_runtime(settings)
    app.state.runtime = runtime
    await runtime.start()
    logger.info("TaskFlow API started")
    yield
    logger.info("TaskFlow API shutting down")
    await runtime.stop()
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="TaskFlow API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(comments.router)
app.include_router(dashboard.router)
app.include_router(notifications.router)

register_error_handlers(app)
