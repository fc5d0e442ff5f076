"""FastAPI application factory.

Run with:
  uvicorn --factory stockroom.api.app:create_app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from stockroom.api.items import router as items_router
from stockroom.config import Settings, get_settings
from stockroom.integrations.fastapi import init_app, register_exception_handlers
from stockroom.lifecycle.observability import enable_tracing
from stockroom.models import Item

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create item indexes once the database connection is open."""
    names = await Item.ensure_indexes()
    logger.info("Ensured %d indexes on '%s'", len(names), Item._collection_name)
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    level = settings.log_level.upper()
    # No-op when the server (or pytest) already installed root handlers.
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("stockroom").setLevel(level)

    if settings.trace_queries:
        enable_tracing(slow_query_ms=settings.slow_query_ms)

    app = FastAPI(
        title="Stockroom API",
        description="Item catalogue with cursor-based pagination",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    init_app(app, settings.mongo_uri)
    register_exception_handlers(app)
    app.include_router(items_router, prefix="/api")
    return app
