"""``key=value`` context carried on every log line (job name, task label, ...)."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Iterator, Mapping

_fields: contextvars.ContextVar[Mapping[str, object]] = contextvars.ContextVar(
    "salary_log_fields", default=MappingProxyType({})
)


def _merged(values: Mapping[str, object]) -> Mapping[str, object]:
    merged = dict(_fields.get())
    merged.update((key, value) for key, value in values.items() if value is not None)
    return MappingProxyType(merged)


class LogContext:
    """Bound fields live in a context variable, so threads and tasks stay isolated."""

    @contextmanager
    def scoped(self, **values: object) -> Iterator[None]:
        token = _fields.set(_merged(values))
        try:
            yield
        finally:
            _fields.reset(token)


def render(fields: Mapping[str, object]) -> str:
    if not fields:
        return ""
    return " ".join(f"{key}={value}" for key, value in fields.items()) + " "


class ContextFilter(logging.Filter):
    """Stamp ``record.context`` once; later filters on the same record keep the first value."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = render(_fields.get())
        return True


log_context = LogContext()
