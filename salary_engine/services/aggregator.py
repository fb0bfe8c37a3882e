"""Fold approved crowd reports into aggregated salary records."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from salary_engine.core.log import get_logger, timeit
from salary_engine.models import Confidence, ReportStatus, SalaryReport, SalarySource
from salary_engine.repositories import (
    SalaryRecordData,
    SalaryRecordRepository,
    SalaryReportRepository,
)

LOGGER = get_logger(__name__)

MIN_GROUP_SIZE = 2
HIGH_CONFIDENCE_GROUP_SIZE = 5


@dataclass(frozen=True)
class ReportGroup:
    company_normalized: str
    title_normalized: str
    reports: tuple[SalaryReport, ...]

    def to_record(self, *, location: str, currency: str) -> SalaryRecordData:
        salaries = sorted(report.base_salary for report in self.reports)
        size = len(salaries)
        first = self.reports[0]
        return SalaryRecordData(
            company_name=first.company_name,
            company_name_normalized=self.company_normalized,
            job_title=first.job_title,
            job_title_normalized=self.title_normalized,
            location=location,
            min_salary=salaries[0],
            max_salary=salaries[-1],
            median_salary=salaries[size // 2],
            currency=currency,
            sample_count=size,
            source=SalarySource.AGGREGATED_REPORTS.value,
            confidence=(
                Confidence.HIGH.value if size >= HIGH_CONFIDENCE_GROUP_SIZE else Confidence.MEDIUM.value
            ),
        )


def group_reports(reports: list[SalaryReport]) -> list[ReportGroup]:
    """Group by normalized (company, title), dropping groups below the minimum size."""

    grouped: dict[tuple[str, str], list[SalaryReport]] = defaultdict(list)
    for report in reports:
        grouped[(report.company_name_normalized, report.job_title_normalized)].append(report)
    return [
        ReportGroup(company, title, tuple(members))
        for (company, title), members in grouped.items()
        if len(members) >= MIN_GROUP_SIZE
    ]


class ReportAggregator:
    """Recompute aggregated records from the full approved-report set.

    Each run replaces the previous aggregate for a group, so repeating it over
    the same reports yields the same records.
    """

    def __init__(
        self,
        reports: SalaryReportRepository,
        records: SalaryRecordRepository,
        *,
        location: str = "Israel",
        currency: str = "ILS",
    ) -> None:
        self._reports = reports
        self._records = records
        self._location = location
        self._currency = currency

    def aggregate_approved_reports(self) -> int:
        """Returns the number of aggregated records written."""

        approved = self._reports.list_by_status(ReportStatus.APPROVED)
        groups = group_reports(approved)
        LOGGER.info(
            "Aggregating %d approved reports into %d groups", len(approved), len(groups)
        )
        with timeit("Report aggregation", logger=LOGGER, unit="groups", total=len(groups)) as timer:
            for group in groups:
                record = group.to_record(location=self._location, currency=self._currency)
                if self._records.upsert(record):
                    timer.add()
                else:
                    timer.fail()
        return timer.count
