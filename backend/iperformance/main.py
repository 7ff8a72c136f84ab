"""iPerformance API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map IPerformanceError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from iperformance.api.error_handlers import register_error_handlers
from iperformance.api.routes import (
    challenges, dashboard, goals, health, objectives, periods, risks, tasks,
)
from iperformance.config import get_settings
from iperformance.infrastructure.database import init_db
from iperformance.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("iPerformance API started")
    yield
    logger.info("iPerformance API shutting down")


app = FastAPI(
    title="iPerformance API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(tasks.router)
app.include_router(goals.router)
app.include_router(objectives.router)
app.include_router(risks.router)
app.include_router(challenges.router)
app.include_router(periods.router)
app.include_router(dashboard.router)

register_error_handlers(app)
