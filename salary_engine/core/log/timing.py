"""Outcome summaries for batch runs: stored vs failed items, duration and rate."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class BatchTimer:
    """Running tally for one batch; jobs return ``timer.count`` as their result."""

    label: str
    logger: logging.Logger
    unit: str = "items"
    total: Optional[int] = None
    count: int = 0
    failed: int = 0
    started: float = field(default_factory=perf_counter)

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def fail(self, amount: int = 1) -> None:
        self.failed += amount

    @property
    def elapsed(self) -> float:
        return perf_counter() - self.started

    def summary(self) -> str:
        parts = [f"{self.count:,} {self.unit} stored"]
        if self.failed:
            parts.append(f"{self.failed:,} failed")
        if self.total is not None:
            parts.append(f"of {self.total:,} attempted")
        elapsed = self.elapsed
        rate = f", {self.count / elapsed:,.1f} {self.unit}/s" if elapsed > 0 and self.count else ""
        return f"{self.label}: {', '.join(parts)} in {elapsed:.2f}s{rate}"


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "items",
    total: Optional[int] = None,
) -> Iterator[BatchTimer]:
    """Time the enclosed batch and log one summary line.

    An exception escaping the block is logged at error level with the tally
    so far and re-raised.
    """

    timer = BatchTimer(label, logger or logging.getLogger("salary_engine.batch"), unit, total)
    try:
        yield timer
    except Exception:
        timer.logger.error("%s aborted after %.2fs (%d stored, %d failed)", label, timer.elapsed, timer.count, timer.failed)
        raise
    timer.logger.log(level, timer.summary())
