"""
Health check endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_session
from src.database import check_database
from src.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    session: AsyncSession = Depends(get_session),
) -> HealthResponse | JSONResponse:
    """UP when the database answers, DOWN (HTTP 503) otherwise."""
    if await check_database(session):
        return HealthResponse(status="UP", database="connected")

    body = HealthResponse(status="DOWN", database="disconnected")
    return JSONResponse(status_code=503, content=body.model_dump())
