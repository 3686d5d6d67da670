"""
FastAPI dependency providers.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session from the factory created at startup.

    Tests override this dependency with an in-memory SQLite session.
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not initialized. Server not started?")

    async with session_factory() as session:
        yield session
