"""Database models for salary records and reports."""
from __future__ import annotations

from .base import Base, TimestampMixin
from .salary import (
    Confidence,
    ReportStatus,
    SalaryPeriod,
    SalaryRecord,
    SalaryReport,
    SalarySource,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Confidence",
    "ReportStatus",
    "SalaryPeriod",
    "SalaryRecord",
    "SalaryReport",
    "SalarySource",
]
