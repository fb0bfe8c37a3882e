"""Fire-and-forget dispatch for batch jobs triggered by API requests."""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Callable

from salary_engine.core.log import get_logger, log_context

LOGGER = get_logger(__name__)


class BackgroundDispatcher(ABC):
    """Run a job detached from the caller; failures are logged, never raised."""

    @abstractmethod
    def submit(self, label: str, job: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Start ``job(*args, **kwargs)`` and return without waiting for it."""

    @staticmethod
    def _run(label: str, job: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        with log_context.scoped(task=label):
            LOGGER.info("Background job started")
            try:
                result = job(*args, **kwargs)
            except Exception:
                LOGGER.exception("Background job failed")
                return
            if result is not None:
                LOGGER.info("Background job finished: %s", result)
            else:
                LOGGER.info("Background job finished")


class ThreadDispatcher(BackgroundDispatcher):
    """Start each job on its own daemon thread."""

    def submit(self, label: str, job: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        thread = threading.Thread(
            target=self._run,
            args=(label, job, args, kwargs),
            name=f"salary-job-{label}",
            daemon=True,
        )
        thread.start()


class InlineDispatcher(BackgroundDispatcher):
    """Run jobs synchronously on the calling thread (scripts and tests)."""

    def __init__(self) -> None:
        self.submitted: list[str] = []

    def submit(self, label: str, job: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self.submitted.append(label)
        self._run(label, job, args, kwargs)


@lru_cache(maxsize=1)
def get_dispatcher() -> BackgroundDispatcher:
    return ThreadDispatcher()
