"""
Dofus Retro Tracker - Application Entrypoint

Configures structlog, verifies the database connection and serves the REST
API with uvicorn.

Run via:
    python -m src.main
    uvicorn src.main:app
"""

from __future__ import annotations

import asyncio

import structlog
import uvicorn

from src.api import create_app
from src.config import settings
from src.database import check_database, create_db_engine
from src.logging_setup import configure_logging

app = create_app()


async def verify_database() -> None:
    """
    Fail fast when the database is unreachable.

    Raises:
        RuntimeError: If SELECT 1 does not succeed.
    """
    logger = structlog.get_logger(__name__)
    engine, session_factory = create_db_engine()
    try:
        async with session_factory() as session:
            healthy = await check_database(session)
    finally:
        await engine.dispose()

    if not healthy:
        raise RuntimeError("Database health check failed")
    logger.info("database_health_check_passed")


async def main() -> None:
    """
    Application entrypoint.

    Execution order:
    1. Configure logging (structlog JSON)
    2. Verify database connection
    3. Serve the API until shutdown signal
    """
    configure_logging(log_level=settings.LOG_LEVEL)
    logger = structlog.get_logger(__name__)

    logger.info("price_tracker_startup_begin", version="0.1.0")

    try:
        await verify_database()
    except Exception as e:
        logger.error(
            "price_tracker_startup_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    config = uvicorn.Config(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server = uvicorn.Server(config)

    logger.info(
        "price_tracker_startup_complete",
        host=settings.API_HOST,
        port=settings.API_PORT,
    )
    try:
        await server.serve()
    finally:
        logger.info("price_tracker_shutdown_complete")


if __name__ == "__main__":
    asyncio.run(main())
