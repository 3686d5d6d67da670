"""
SQLAlchemy 2.0 async DeclarativeBase for the price tracker.

All models inherit from this Base.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware UTC now, used as the Python-side timestamp default."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all price tracker database models."""
    pass
