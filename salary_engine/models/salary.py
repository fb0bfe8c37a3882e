"""ORM models for resolved salary records and crowd-sourced salary reports."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

_ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SalarySource(str, Enum):
    """Which subsystem produced a ``SalaryRecord``."""

    SEED_SURVEY = "seed-survey"
    EXTERNAL_API = "external-api"
    SCRAPED = "scraped"
    AGGREGATED_REPORTS = "aggregated-reports"
    COMPUTED = "computed"


class Confidence(str, Enum):
    """How much empirical support backs a figure."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SalaryPeriod(str, Enum):
    """Pay period of stored amounts (records are always normalised to monthly)."""

    MONTHLY = "monthly"
    ANNUAL = "annual"
    HOURLY = "hourly"


class ReportStatus(str, Enum):
    """Moderation state of a crowd-submitted report."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SalaryRecord(Base, TimestampMixin):
    """A resolved, storable compensation data point.

    Identity is ``(company_name_normalized, job_title_normalized, location)``;
    amounts are integer monthly figures in a single currency.
    """

    __tablename__ = "salary_data"
    __table_args__ = (
        UniqueConstraint(
            "company_name_normalized",
            "job_title_normalized",
            "location",
            name="uq_salary_data_key",
        ),
        Index("ix_salary_data_company", "company_name_normalized"),
        Index("ix_salary_data_title", "job_title_normalized"),
        Index("ix_salary_data_fetched", "fetched_date"),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    company_name_normalized: Mapped[str] = mapped_column(String(200), nullable=False)
    job_title: Mapped[str | None] = mapped_column(String(200))
    job_title_normalized: Mapped[str | None] = mapped_column(String(200))
    location: Mapped[str] = mapped_column(String(120), nullable=False, default="Israel")
    min_salary: Mapped[int | None] = mapped_column(Integer)
    max_salary: Mapped[int | None] = mapped_column(Integer)
    median_salary: Mapped[int | None] = mapped_column(Integer)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ILS")
    salary_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default=SalaryPeriod.MONTHLY.value
    )
    sample_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    source_url: Mapped[str | None] = mapped_column(String(500))
    confidence: Mapped[str] = mapped_column(
        String(8), nullable=False, default=Confidence.MEDIUM.value
    )
    fetched_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def is_usable(self) -> bool:
        """Records without a positive minimum are ignored by the resolver."""

        return bool(self.min_salary and self.min_salary > 0)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"SalaryRecord(company={self.company_name_normalized!r}, "
            f"title={self.job_title_normalized!r}, source={self.source!r}, "
            f"range={self.min_salary}-{self.max_salary})"
        )


class SalaryReport(Base, TimestampMixin):
    """A single crowd-submitted salary data point awaiting or past moderation."""

    __tablename__ = "salary_reports"
    __table_args__ = (
        Index("ix_salary_reports_company", "company_name_normalized"),
        Index("ix_salary_reports_title", "job_title_normalized"),
        Index("ix_salary_reports_status", "status"),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[str | None] = mapped_column(String(64))
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    company_name_normalized: Mapped[str] = mapped_column(String(200), nullable=False)
    job_title: Mapped[str] = mapped_column(String(200), nullable=False)
    job_title_normalized: Mapped[str] = mapped_column(String(200), nullable=False)
    experience_years: Mapped[int | None] = mapped_column(Integer)
    location: Mapped[str] = mapped_column(String(120), nullable=False, default="Israel")
    base_salary: Mapped[int] = mapped_column(Integer, nullable=False)
    total_compensation: Mapped[int | None] = mapped_column(Integer)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ILS")
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verification_method: Mapped[str | None] = mapped_column(String(32))
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReportStatus.PENDING.value
    )
    ip_hash: Mapped[str | None] = mapped_column(String(64))
