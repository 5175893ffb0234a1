"""Engine for the Supabase Postgres tables the gateway reads and appends to."""

import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL

from ai_proxy.config import Settings, get_settings

logger = logging.getLogger(__name__)


class DatabaseNotConfiguredError(RuntimeError):
    """Neither DB_HOST nor DATABASE_URL is set."""


def database_url(settings: Settings) -> URL | str:
    """
    Connection URL for the service-role database user.

    DB_* params win over DATABASE_URL; they survive passwords with
    characters a URL would need escaped.

    Raises:
        DatabaseNotConfiguredError: if no connection is configured
    """
    if settings.db_host:
        return URL.create(
            drivername="postgresql",
            username=settings.db_user,
            password=settings.db_password,
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
        )
    if settings.database_url:
        return settings.database_url
    raise DatabaseNotConfiguredError(
        "Database not configured: set DB_HOST (with DB_USER/DB_PASSWORD) or DATABASE_URL"
    )


def build_engine(settings: Settings) -> Engine:
    url = database_url(settings)

    if isinstance(url, str) and url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)

    # One quota read and at most one insert per request
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=False,
    )


@lru_cache
def get_engine() -> Engine:
    """Engine for the process settings, created on first use."""
    engine = build_engine(get_settings())
    logger.info(f"Database engine ready: dialect={engine.dialect.name}")
    return engine
