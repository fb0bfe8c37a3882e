"""Admin-only salary maintenance routes (X-Admin-Key protected)."""
from __future__ import annotations

from functools import partial

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session, sessionmaker

from salary_engine.core.config import Settings, get_settings
from salary_engine.core.log import get_logger
from salary_engine.core.security import ADMIN_HEADER, admin_key_matches, require_admin
from salary_engine.repositories import SalaryRecordRepository, SalaryReportRepository
from salary_engine.schemas import AdminKeyCheck, BackgroundTaskStarted, ModerationRequest
from salary_engine.services import BackgroundDispatcher, SalaryReportService, get_dispatcher, populate_survey
from salary_engine.services.jobs import (
    refresh_all,
    run_aggregation,
    run_company_populate,
    run_external_fetch,
)

from .deps import get_db_session, get_session_factory

router = APIRouter(prefix="/salaries/admin", tags=["salaries-admin"])
LOGGER = get_logger(__name__)

MODERATION_ACTIONS = ("approve", "reject")


def get_moderation_service(
    session: Session = Depends(get_db_session),
    factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
) -> SalaryReportService:
    return SalaryReportService(
        SalaryReportRepository(session),
        ip_salt=settings.admin.session_secret,
        dispatcher=dispatcher,
        aggregation_job=partial(run_aggregation, factory, settings),
    )


@router.get("/check", response_model=AdminKeyCheck)
def check_admin_key(
    x_admin_key: str | None = Header(default=None, alias=ADMIN_HEADER),
    settings: Settings = Depends(get_settings),
) -> AdminKeyCheck:
    return AdminKeyCheck(
        admin_key_configured=settings.admin.enabled,
        header_key_length=len(x_admin_key or ""),
        keys_match=admin_key_matches(settings.admin.key, x_admin_key),
    )


@router.post("/populate-survey", dependencies=[Depends(require_admin)])
def populate_survey_data(
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    written = populate_survey(
        SalaryRecordRepository(session),
        location=settings.estimation.default_location,
        currency=settings.estimation.currency,
    )
    return {"message": "Survey salary data populated successfully", "records": written}


@router.post(
    "/fetch-external",
    response_model=BackgroundTaskStarted,
    dependencies=[Depends(require_admin)],
)
def fetch_external(
    factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
) -> BackgroundTaskStarted:
    if not settings.external.api_enabled:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="RAPIDAPI_KEY not configured")
    dispatcher.submit("external-fetch", run_external_fetch, factory, settings)
    return BackgroundTaskStarted(message="External salary fetch started in background")


@router.post("/refresh", response_model=BackgroundTaskStarted, dependencies=[Depends(require_admin)])
def refresh_salary_data(
    factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
) -> BackgroundTaskStarted:
    dispatcher.submit("refresh-all", refresh_all, factory, settings)
    return BackgroundTaskStarted(message="Salary data refresh started in background")


@router.post(
    "/populate-companies",
    response_model=BackgroundTaskStarted,
    dependencies=[Depends(require_admin)],
)
def populate_companies(
    factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
) -> BackgroundTaskStarted:
    dispatcher.submit("populate-companies", run_company_populate, factory, settings)
    return BackgroundTaskStarted(message="Company salary population started in background")


@router.post("/aggregate", response_model=BackgroundTaskStarted, dependencies=[Depends(require_admin)])
def aggregate_reports(
    factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
) -> BackgroundTaskStarted:
    dispatcher.submit("aggregate-reports", run_aggregation, factory, settings)
    return BackgroundTaskStarted(message="Report aggregation started in background")


@router.get("/pending-count", dependencies=[Depends(require_admin)])
def pending_count(service: SalaryReportService = Depends(get_moderation_service)) -> dict[str, int]:
    return {"pending_count": service.pending_count()}


@router.post("/moderate/{report_id}", dependencies=[Depends(require_admin)])
def moderate_report(
    report_id: int,
    payload: ModerationRequest,
    service: SalaryReportService = Depends(get_moderation_service),
) -> dict[str, object]:
    if payload.action not in MODERATION_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Action must be "approve" or "reject"',
        )
    if not service.moderate(report_id, payload.action):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report {report_id} not found or already moderated",
        )
    return {"success": True, "message": f"Report {payload.action}d successfully"}
