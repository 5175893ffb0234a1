"""Database session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from ai_proxy.database.engine import get_engine

# Bound to the cached engine in get_db()
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, Any, None]:
    """
    FastAPI dependency that yields a database session.

    The gateway connects with service-role credentials, so no RLS context
    is set: every query it issues is explicitly scoped by user_id.
    """
    db = SessionLocal(bind=get_engine())
    try:
        yield db
    finally:
        db.close()
