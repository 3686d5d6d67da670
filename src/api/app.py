"""
FastAPI application factory.

Run with:
    python -m src.main
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import setup_error_handlers
from src.api.routers import categories_router, health_router, items_router
from src.config import settings
from src.database import create_db_engine

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the database engine on startup and dispose of it on shutdown."""
    engine, session_factory = create_db_engine()
    app.state.engine = engine
    app.state.session_factory = session_factory
    logger.info("api_startup_complete", prefix=settings.API_PREFIX)

    yield

    await engine.dispose()
    logger.info("api_shutdown_complete")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Build the application.

    Args:
        use_lifespan: Disable to skip engine creation (tests inject sessions
            through dependency overrides).
    """
    app = FastAPI(
        title="Dofus Retro Price Tracker API",
        description="Auction house items, categories and price history",
        version="0.1.0",
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",") if o.strip()],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    setup_error_handlers(app)

    app.include_router(items_router, prefix=settings.API_PREFIX, tags=["Items"])
    app.include_router(categories_router, prefix=settings.API_PREFIX, tags=["Categories"])
    app.include_router(health_router, prefix=settings.API_PREFIX, tags=["Health"])

    return app
