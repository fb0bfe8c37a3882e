"""Database helpers and SQLAlchemy session factories."""

from .engine import create_sync_engine
from .session import build_sessionmaker, get_sessionmaker, session_scope

__all__ = [
    "build_sessionmaker",
    "create_sync_engine",
    "get_sessionmaker",
    "session_scope",
]
