"""Request and response payloads for the salary API."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EstimateSource(str, Enum):
    """Which step of the fallback chain produced an estimate."""

    DATABASE = "database"
    SURVEY = "israeli_data"
    COMPUTED = "computed"
    ESTIMATED = "estimated"


ConfidenceLevel = Literal["low", "medium", "high"]


class SalaryRecordOut(BaseModel):
    """A stored salary record as returned by lookup endpoints."""

    model_config = ConfigDict(from_attributes=True)

    company_name: str
    company_name_normalized: str
    job_title: str | None = None
    job_title_normalized: str | None = None
    location: str
    min_salary: int | None = None
    max_salary: int | None = None
    median_salary: int | None = None
    currency: str
    salary_type: str
    sample_count: int
    source: str
    source_url: str | None = None
    confidence: str
    fetched_date: datetime | None = None


class CompanySalaries(BaseModel):
    company: str
    salaries: list[SalaryRecordOut]
    count: int


class EstimateRequest(BaseModel):
    """One job to estimate; optional fields fall back to route defaults."""

    company: str = ""
    title: str = ""
    level: str | None = None
    category: str | None = None
    size: str | None = None


class SalaryEstimate(BaseModel):
    """Structured resolver output; ``0 <= min <= max`` always holds."""

    min: int = Field(ge=0)
    max: int = Field(ge=0)
    source: EstimateSource
    confidence: ConfidenceLevel

    @property
    def is_resolved(self) -> bool:
        return self.min > 0

    @classmethod
    def unresolved(cls) -> "SalaryEstimate":
        return cls(min=0, max=0, source=EstimateSource.ESTIMATED, confidence="low")


class BatchEstimateRequest(BaseModel):
    jobs: list[EstimateRequest]


class BatchEstimateItem(SalaryEstimate):
    company: str
    title: str


class BatchEstimateResponse(BaseModel):
    estimates: list[BatchEstimateItem]


class SalaryReportSubmission(BaseModel):
    """Anonymous crowd report; ``base_salary`` is monthly."""

    company_name: str
    job_title: str
    base_salary: int
    experience_years: int | None = None
    location: str | None = None
    total_compensation: int | None = None
    currency: str | None = None

    @field_validator("company_name", "job_title")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class SubmissionResult(BaseModel):
    success: bool
    error: str | None = None


class SubmissionResponse(BaseModel):
    success: bool
    message: str
    verified: bool


class ModerationRequest(BaseModel):
    action: str


class SalaryStats(BaseModel):
    """Record store summary for the admin dashboard."""

    total_entries: int = 0
    unique_companies: int = 0
    by_source: dict[str, int] = Field(default_factory=dict)
    last_fetch: datetime | None = None


class BackgroundTaskStarted(BaseModel):
    message: str


class AdminKeyCheck(BaseModel):
    admin_key_configured: bool
    header_key_length: int
    keys_match: bool
