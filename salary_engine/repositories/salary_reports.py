"""Report store: crowd-submitted salary reports and their moderation status."""
from __future__ import annotations

from sqlalchemy import func, select, update

from salary_engine.core.log import get_logger
from salary_engine.models import ReportStatus, SalaryReport

from .base import BaseRepository

LOGGER = get_logger(__name__)


class SalaryReportRepository(BaseRepository):
    """Persistence for :class:`SalaryReport` rows."""

    def insert(self, report: SalaryReport) -> int | None:
        """Persist ``report`` and return its id, or ``None`` on store error."""

        def _insert() -> int:
            self._session.add(report)
            self._session.commit()
            return report.id

        return self._guarded("report insert", _insert, None)

    def get(self, report_id: int) -> SalaryReport | None:
        return self._guarded(
            "report get", lambda: self._session.get(SalaryReport, report_id), None
        )

    def list_by_status(self, status: ReportStatus) -> list[SalaryReport]:
        statement = (
            select(SalaryReport)
            .where(SalaryReport.status == status.value)
            .order_by(SalaryReport.id)
        )
        return self._guarded(
            f"list {status.value} reports",
            lambda: list(self._session.execute(statement).scalars().all()),
            [],
        )

    def count_by_status(self, status: ReportStatus) -> int:
        statement = select(func.count(SalaryReport.id)).where(SalaryReport.status == status.value)
        return self._guarded(
            f"count {status.value} reports",
            lambda: self._to_int(self._session.execute(statement).scalar()),
            0,
        )

    def set_status(self, report_id: int, status: ReportStatus) -> bool:
        """Move one pending report to ``status``.

        Approved and rejected are terminal: ``False`` when the report is missing,
        already moderated, or the store fails.
        """

        def _update() -> bool:
            result = self._session.execute(
                update(SalaryReport)
                .where(
                    SalaryReport.id == report_id,
                    SalaryReport.status == ReportStatus.PENDING.value,
                )
                .values(status=status.value)
            )
            self._session.commit()
            if result.rowcount == 0:
                LOGGER.info("Moderation matched no pending report id=%s", report_id)
                return False
            return True

        return self._guarded(f"status update for report {report_id}", _update, False)
