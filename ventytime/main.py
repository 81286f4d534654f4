"""VentyTime API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map VentyTimeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and upload directory created on startup via lifespan
    - Uploaded images served from uploads_url_prefix ("/uploads")

Design Decisions:
    - Lifespan over @app.on_event: startup and shutdown in one place
    - StaticFiles(check_dir=False): the directory is created by the lifespan, after import
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import ventytime.infrastructure.database as db_module
from ventytime import __version__
from ventytime.api.error_handlers import register_error_handlers
from ventytime.api.routes import (
    auth, comments, events, health, notification_hub, notifications, registrations,
    upload, users,
)
from ventytime.config import get_settings
from ventytime.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    db_module.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("VentyTime API started")
    yield
    if db_module.db_manager is not None:
        await db_module.db_manager.dispose()
    logger.info("VentyTime API shutting down")


app = FastAPI(title="VentyTime API", version=__version__, lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(registrations.router)
app.include_router(comments.router)
app.include_router(users.router)
app.include_router(notifications.router)
app.include_router(upload.router)
app.include_router(notification_hub.router)

app.mount(
    settings.uploads_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)
