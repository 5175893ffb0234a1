from datetime import datetime, timezone

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for the gateway's view of the Supabase tables."""


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def created_at_column() -> Mapped[datetime]:
    """Server-assigned creation timestamp (Postgres default, Python fallback for SQLite)."""
    return mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=utc_now,
        nullable=False,
    )


def updated_at_column() -> Mapped[datetime]:
    """Create an updated_at column with cross-database compatibility."""
    return mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
