"""Shelf Inventory API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map InventoryError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; form failures are not errors
      and are answered by the routes themselves
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory.api.error_handlers import register_error_handlers
from inventory.api.routes import (
    assets, bookings, catalog, custom_fields, health, organizations,
)
from inventory.config import get_settings
from inventory.infrastructure.database import init_db
from inventory.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Shelf Inventory API started")
    yield
    logger.info("Shelf Inventory API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Shelf Inventory API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(organizations.router)
app.include_router(catalog.router)
app.include_router(custom_fields.router)
app.include_router(assets.router)
app.include_router(bookings.router)

register_error_handlers(app)
