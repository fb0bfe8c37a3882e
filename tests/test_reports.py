"""Report intake, moderation transitions and aggregation."""
from __future__ import annotations

from unittest.mock import MagicMock, create_autospec

import pytest

from salary_engine.core.security import hash_ip
from salary_engine.models import ReportStatus
from salary_engine.repositories import SalaryRecordRepository, SalaryReportRepository
from salary_engine.schemas import SalaryReportSubmission
from salary_engine.services import BackgroundDispatcher, InlineDispatcher, ReportAggregator, SalaryReportService
from salary_engine.services.reports import OUT_OF_RANGE_ERROR, STORE_FAILURE_ERROR


def _submission(company: str = "Wix", title: str = "Backend Developer", salary: int = 30000, **extra):
    return SalaryReportSubmission(company_name=company, job_title=title, base_salary=salary, **extra)


@pytest.mark.parametrize("salary, accepted", [(4999, False), (5000, True), (200000, True), (200001, False)])
def test_submit_enforces_salary_band(session, salary, accepted) -> None:
    service = SalaryReportService(SalaryReportRepository(session))

    result = service.submit(_submission(salary=salary))

    assert result.success is accepted
    if not accepted:
        assert result.error == OUT_OF_RANGE_ERROR


def test_submit_stores_pending_report_with_defaults(session) -> None:
    repo = SalaryReportRepository(session)
    service = SalaryReportService(repo, ip_salt="pepper")

    assert service.submit(_submission(company="Monday.com"), ip_address="10.0.0.7").success

    (report,) = repo.list_by_status(ReportStatus.PENDING)
    assert report.company_name_normalized == "mondaycom"
    assert report.location == "Israel"
    assert report.currency == "ILS"
    assert report.is_verified is False
    assert report.ip_hash == hash_ip("10.0.0.7", "pepper")
    assert len(report.ip_hash) == 16
    assert "10.0.0.7" not in report.ip_hash


def test_submit_marks_logged_in_reports_verified(session) -> None:
    repo = SalaryReportRepository(session)
    service = SalaryReportService(repo)

    service.submit(_submission(), user_id="user-1")

    (report,) = repo.list_by_status(ReportStatus.PENDING)
    assert report.is_verified is True
    assert report.ip_hash is None


def test_submit_reports_store_failure() -> None:
    repo = create_autospec(SalaryReportRepository, instance=True)
    repo.insert.return_value = None

    result = SalaryReportService(repo).submit(_submission())

    assert result.success is False
    assert result.error == STORE_FAILURE_ERROR


def test_submission_requires_company_and_title() -> None:
    with pytest.raises(ValueError):
        _submission(company="   ")


def test_moderation_transitions(session) -> None:
    repo = SalaryReportRepository(session)
    service = SalaryReportService(repo)
    service.submit(_submission())
    service.submit(_submission(company="Gong"))
    first, second = repo.list_by_status(ReportStatus.PENDING)

    assert service.pending_count() == 2
    assert service.moderate(first.id, "approve")
    assert service.moderate(second.id, "reject")

    assert service.pending_count() == 0
    assert repo.get(first.id).status == ReportStatus.APPROVED.value
    assert repo.get(second.id).status == ReportStatus.REJECTED.value


def test_moderated_reports_are_terminal(session) -> None:
    repo = SalaryReportRepository(session)
    dispatcher = InlineDispatcher()
    service = SalaryReportService(repo, dispatcher=dispatcher, aggregation_job=MagicMock())
    service.submit(_submission())
    service.submit(_submission(company="Gong"))
    rejected, approved = repo.list_by_status(ReportStatus.PENDING)
    service.moderate(rejected.id, "reject")
    service.moderate(approved.id, "approve")

    assert service.moderate(rejected.id, "approve") is False
    assert service.moderate(approved.id, "reject") is False
    assert service.moderate(approved.id, "approve") is False

    assert repo.get(rejected.id).status == ReportStatus.REJECTED.value
    assert repo.get(approved.id).status == ReportStatus.APPROVED.value
    assert dispatcher.submitted == ["aggregate-reports"]


def test_moderating_missing_report_returns_false(session) -> None:
    service = SalaryReportService(SalaryReportRepository(session))

    assert service.moderate(9999, "approve") is False
    assert service.moderate(1, "archive") is False


def test_approval_dispatches_aggregation(session) -> None:
    repo = SalaryReportRepository(session)
    dispatcher = InlineDispatcher()
    job = MagicMock(return_value=1)
    service = SalaryReportService(repo, dispatcher=dispatcher, aggregation_job=job)
    service.submit(_submission())
    (report,) = repo.list_by_status(ReportStatus.PENDING)

    service.moderate(report.id, "approve")

    assert dispatcher.submitted == ["aggregate-reports"]
    job.assert_called_once_with()


def test_rejection_does_not_dispatch(session) -> None:
    repo = SalaryReportRepository(session)
    dispatcher = InlineDispatcher()
    service = SalaryReportService(repo, dispatcher=dispatcher, aggregation_job=MagicMock())
    service.submit(_submission())
    (report,) = repo.list_by_status(ReportStatus.PENDING)

    service.moderate(report.id, "reject")

    assert dispatcher.submitted == []


def _approved(session, company: str, title: str, salaries: list[int]) -> None:
    repo = SalaryReportRepository(session)
    service = SalaryReportService(repo)
    for salary in salaries:
        service.submit(_submission(company=company, title=title, salary=salary))
    for report in repo.list_by_status(ReportStatus.PENDING):
        repo.set_status(report.id, ReportStatus.APPROVED)


def _aggregator(session) -> ReportAggregator:
    return ReportAggregator(SalaryReportRepository(session), SalaryRecordRepository(session))


def test_single_report_group_is_not_aggregated(session) -> None:
    _approved(session, "Wix", "Backend Developer", [30000])

    assert _aggregator(session).aggregate_approved_reports() == 0
    assert SalaryRecordRepository(session).find("wix") is None


def test_two_report_group_is_aggregated(session) -> None:
    _approved(session, "Wix", "Backend Developer", [40000, 30000])

    assert _aggregator(session).aggregate_approved_reports() == 1

    record = SalaryRecordRepository(session).find("wix", "backend developer")
    assert (record.min_salary, record.median_salary, record.max_salary) == (30000, 40000, 40000)
    assert record.sample_count == 2
    assert record.source == "aggregated-reports"
    assert record.confidence == "medium"


def test_large_group_is_high_confidence_and_ordered(session) -> None:
    _approved(session, "Gong", "Data Scientist", [52000, 31000, 47000, 38000, 44000, 60000])

    _aggregator(session).aggregate_approved_reports()

    record = SalaryRecordRepository(session).find("gong", "data scientist")
    assert record.min_salary <= record.median_salary <= record.max_salary
    assert record.median_salary == 47000
    assert record.sample_count == 6
    assert record.confidence == "high"


def test_aggregation_is_idempotent(session) -> None:
    _approved(session, "Wix", "Backend Developer", [30000, 35000, 40000])
    aggregator = _aggregator(session)

    aggregator.aggregate_approved_reports()
    aggregator.aggregate_approved_reports()

    records = SalaryRecordRepository(session).find_all_for_company("wix")
    assert len(records) == 1
    assert records[0].median_salary == 35000


def test_pending_and_rejected_reports_are_ignored(session) -> None:
    repo = SalaryReportRepository(session)
    service = SalaryReportService(repo)
    for salary in (30000, 32000, 34000):
        service.submit(_submission(salary=salary))
    reports = repo.list_by_status(ReportStatus.PENDING)
    repo.set_status(reports[0].id, ReportStatus.APPROVED)
    repo.set_status(reports[1].id, ReportStatus.REJECTED)

    assert _aggregator(session).aggregate_approved_reports() == 0


def test_dispatcher_base_is_abstract() -> None:
    with pytest.raises(TypeError):
        BackgroundDispatcher()
