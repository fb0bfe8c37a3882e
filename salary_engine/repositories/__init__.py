"""Data access for salary records and reports."""

from .salary_records import RecordStats, SalaryRecordData, SalaryRecordRepository
from .salary_reports import SalaryReportRepository

__all__ = [
    "RecordStats",
    "SalaryRecordData",
    "SalaryRecordRepository",
    "SalaryReportRepository",
]
