"""Request-scoped dependencies shared by the salary routers."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session, sessionmaker

from salary_engine.db.session import get_sessionmaker


def get_session_factory() -> sessionmaker:
    """Session factory used both per request and by background jobs."""

    return get_sessionmaker()


def get_db_session(
    factory: sessionmaker = Depends(get_session_factory),
) -> Generator[Session, None, None]:
    """Yield a database session for the request lifecycle."""

    session = factory()
    try:
        yield session
    finally:
        session.close()


def get_current_user_id(request: Request) -> str | None:
    """Authenticated user id if an upstream auth layer set one on the request."""

    user_id = getattr(request.state, "user_id", None)
    return str(user_id) if user_id else None


def client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None
