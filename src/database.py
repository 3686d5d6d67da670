"""
Dofus Retro Tracker - Async engine and session factory.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import settings

logger = structlog.get_logger(__name__)


def create_db_engine(
    database_url: str | None = None,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Create SQLAlchemy async engine and session factory.

    The DATABASE_URL is read from settings unless overridden. SQLite URLs
    (tests, local runs) skip the connection pool sizing.

    Returns:
        (engine, session_factory) tuple.
    """
    url = database_url or settings.DATABASE_URL
    logger.info("database_engine_initializing", database_url=url)

    engine_kwargs: dict[str, Any] = {"echo": False}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_pre_ping=True,  # Verify connections before use
        )

    engine = create_async_engine(url, **engine_kwargs)
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.info("database_engine_ready")
    return engine, session_factory


async def check_database(session: AsyncSession) -> bool:
    """Run SELECT 1. Returns False instead of raising when the DB is down."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(
            "database_health_check_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    return True
