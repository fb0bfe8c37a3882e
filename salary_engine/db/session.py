"""Session factories shared by the API, background jobs and scripts."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from .engine import create_sync_engine


def build_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a new ``sessionmaker`` bound to a freshly created engine."""

    engine = create_sync_engine(url, **kwargs)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@lru_cache(maxsize=None)
def get_sessionmaker(url: str | None = None) -> sessionmaker:
    """Return the process-wide ``sessionmaker`` for ``url`` (configured URL by default)."""

    return build_sessionmaker(url)


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Provide a session that is committed on success and always closed."""

    session = (factory or get_sessionmaker())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
