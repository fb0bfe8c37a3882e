"""Shared helpers for salary repositories."""
from __future__ import annotations

from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salary_engine.core.log import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")

LIKE_ESCAPE = "\\"


class BaseRepository:
    """Base repository that turns store failures into logged fallbacks."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def _guarded(self, label: str, operation: Callable[[], T], fallback: T) -> T:
        """Run ``operation``; on a store error roll back, log and return ``fallback``."""

        try:
            return operation()
        except SQLAlchemyError:
            self._session.rollback()
            LOGGER.exception("Store error during %s", label)
            return fallback

    @staticmethod
    def _contains_pattern(value: str) -> str:
        """``ILIKE`` pattern matching ``value`` anywhere, with wildcards escaped."""

        escaped = (
            value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", f"{LIKE_ESCAPE}%")
            .replace("_", f"{LIKE_ESCAPE}_")
        )
        return f"%{escaped}%"

    @staticmethod
    def _to_int(value: Any) -> int:
        if value is None:
            return 0
        return int(value)
