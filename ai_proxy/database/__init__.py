from .base import Base
from .engine import DatabaseNotConfiguredError, build_engine, get_engine
from .session import SessionLocal, get_db

__all__ = [
    "Base",
    "DatabaseNotConfiguredError",
    "build_engine",
    "get_engine",
    "SessionLocal",
    "get_db",
]
