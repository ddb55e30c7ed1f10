"""Quota Engine API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map QuotaEngineError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quota_engine.api.error_handlers import register_error_handlers
from quota_engine.api.routes import health, quota
from quota_engine.config import get_settings
from quota_engine.infrastructure import database
from quota_engine.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Quota Engine API started")
    yield
    logger.info("Quota Engine API shutting down")
    if database.db_manager:
        await database.db_manager.dispose()


settings = get_settings()
app = FastAPI(title=settings.api_title, version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(quota.router)

register_error_handlers(app)
