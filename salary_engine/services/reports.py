"""Crowd salary report intake and moderation."""
from __future__ import annotations

from typing import Any, Callable

from salary_engine.core.log import get_logger
from salary_engine.core.security import hash_ip
from salary_engine.core.text import normalize
from salary_engine.models import ReportStatus, SalaryReport
from salary_engine.repositories import SalaryReportRepository
from salary_engine.schemas import SalaryReportSubmission, SubmissionResult

from .background import BackgroundDispatcher

LOGGER = get_logger(__name__)

MIN_MONTHLY_SALARY = 5000
MAX_MONTHLY_SALARY = 200000
OUT_OF_RANGE_ERROR = "Salary must be between ₪5,000 and ₪200,000 per month"
STORE_FAILURE_ERROR = "Failed to submit report"

_ACTION_STATUS = {
    "approve": ReportStatus.APPROVED,
    "reject": ReportStatus.REJECTED,
}


def salary_in_range(base_salary: int) -> bool:
    return MIN_MONTHLY_SALARY <= base_salary <= MAX_MONTHLY_SALARY


class SalaryReportService:
    """Validate and store reports; approving one schedules a re-aggregation."""

    def __init__(
        self,
        repository: SalaryReportRepository,
        *,
        ip_salt: str = "",
        default_location: str = "Israel",
        default_currency: str = "ILS",
        dispatcher: BackgroundDispatcher | None = None,
        aggregation_job: Callable[[], Any] | None = None,
    ) -> None:
        self._repository = repository
        self._ip_salt = ip_salt
        self._default_location = default_location
        self._default_currency = default_currency
        self._dispatcher = dispatcher
        self._aggregation_job = aggregation_job

    def submit(
        self,
        report: SalaryReportSubmission,
        user_id: str | None = None,
        ip_address: str | None = None,
    ) -> SubmissionResult:
        if not salary_in_range(report.base_salary):
            return SubmissionResult(success=False, error=OUT_OF_RANGE_ERROR)

        row = SalaryReport(
            user_id=user_id or None,
            company_name=report.company_name,
            company_name_normalized=normalize(report.company_name),
            job_title=report.job_title,
            job_title_normalized=normalize(report.job_title),
            experience_years=report.experience_years or None,
            location=report.location or self._default_location,
            base_salary=report.base_salary,
            total_compensation=report.total_compensation or None,
            currency=report.currency or self._default_currency,
            is_verified=bool(user_id),
            status=ReportStatus.PENDING.value,
            ip_hash=hash_ip(ip_address, self._ip_salt) if ip_address else None,
        )
        report_id = self._repository.insert(row)
        if report_id is None:
            return SubmissionResult(success=False, error=STORE_FAILURE_ERROR)
        LOGGER.info("Salary report %s stored for %s", report_id, row.company_name_normalized)
        return SubmissionResult(success=True)

    def moderate(self, report_id: int, action: str) -> bool:
        """Apply ``action`` to a pending report; ``False`` if it is missing, already moderated or the store fails."""

        status = _ACTION_STATUS.get(action)
        if status is None:
            LOGGER.warning("Unknown moderation action %r for report %s", action, report_id)
            return False
        if not self._repository.set_status(report_id, status):
            return False
        LOGGER.info("Report %s marked %s", report_id, status.value)
        if status is ReportStatus.APPROVED and self._aggregation_job is not None:
            if self._dispatcher is not None:
                self._dispatcher.submit("aggregate-reports", self._aggregation_job)
            else:
                self._aggregation_job()
        return True

    def pending_count(self) -> int:
        return self._repository.count_by_status(ReportStatus.PENDING)
