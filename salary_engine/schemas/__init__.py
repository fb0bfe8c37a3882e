"""Pydantic schemas for request and response payloads."""

from .salaries import (
    AdminKeyCheck,
    BackgroundTaskStarted,
    BatchEstimateItem,
    BatchEstimateRequest,
    BatchEstimateResponse,
    CompanySalaries,
    ConfidenceLevel,
    EstimateRequest,
    EstimateSource,
    ModerationRequest,
    SalaryEstimate,
    SalaryRecordOut,
    SalaryReportSubmission,
    SalaryStats,
    SubmissionResponse,
    SubmissionResult,
)

__all__ = [
    "AdminKeyCheck",
    "BackgroundTaskStarted",
    "BatchEstimateItem",
    "BatchEstimateRequest",
    "BatchEstimateResponse",
    "CompanySalaries",
    "ConfidenceLevel",
    "EstimateRequest",
    "EstimateSource",
    "ModerationRequest",
    "SalaryEstimate",
    "SalaryRecordOut",
    "SalaryReportSubmission",
    "SalaryStats",
    "SubmissionResponse",
    "SubmissionResult",
]
