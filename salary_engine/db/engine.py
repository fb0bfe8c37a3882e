"""Database engine factories."""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from salary_engine.core.config import get_settings
from salary_engine.core.log import get_logger

LOGGER = get_logger(__name__)


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults.

    SQLite URLs get a cross-thread connection so background jobs can share
    the engine; in-memory SQLite additionally shares a single connection.
    """

    settings = get_settings()
    resolved_url = url or settings.database.sqlalchemy_url

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)
    if resolved_url.startswith("sqlite"):
        options.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in resolved_url or resolved_url.rstrip("/") == "sqlite:":
            options.setdefault("poolclass", StaticPool)
    else:
        options.setdefault("pool_pre_ping", True)

    LOGGER.debug("Creating SQLAlchemy engine for %s", url or settings.database.masked_url)
    return create_engine(resolved_url, **options)
