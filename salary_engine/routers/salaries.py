"""Public salary lookup, estimation and report routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from salary_engine.core.config import Settings, get_settings
from salary_engine.core.log import get_logger
from salary_engine.repositories import SalaryRecordRepository, SalaryReportRepository
from salary_engine.schemas import (
    BatchEstimateItem,
    BatchEstimateRequest,
    BatchEstimateResponse,
    CompanySalaries,
    EstimateRequest,
    SalaryEstimate,
    SalaryRecordOut,
    SalaryReportSubmission,
    SalaryStats,
    SubmissionResponse,
)
from salary_engine.services import EstimationResolver, SalaryLookupService, SalaryReportService

from .deps import client_ip, get_current_user_id, get_db_session

router = APIRouter(prefix="/salaries", tags=["salaries"])
LOGGER = get_logger(__name__)

DEFAULT_LEVEL = "Engineer"
DEFAULT_CATEGORY = "software"
DEFAULT_SIZE = "m"
REPORT_THANKS = "Thank you! Your salary report has been submitted and will be reviewed."


def get_lookup_service(session: Session = Depends(get_db_session)) -> SalaryLookupService:
    return SalaryLookupService(SalaryRecordRepository(session))


def get_resolver(session: Session = Depends(get_db_session)) -> EstimationResolver:
    return EstimationResolver.default(SalaryRecordRepository(session))


def get_report_service(
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> SalaryReportService:
    return SalaryReportService(
        SalaryReportRepository(session),
        ip_salt=settings.admin.session_secret,
        default_location=settings.estimation.default_location,
        default_currency=settings.estimation.currency,
    )


def _estimate(resolver: EstimationResolver, job: EstimateRequest) -> SalaryEstimate:
    return resolver.estimate(
        job.company,
        job.title,
        job.level or DEFAULT_LEVEL,
        job.category or DEFAULT_CATEGORY,
        job.size or DEFAULT_SIZE,
    )


@router.get("/lookup", response_model=SalaryRecordOut)
def lookup_salary(
    company: str | None = None,
    title: str | None = None,
    service: SalaryLookupService = Depends(get_lookup_service),
):
    if not company:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company name is required")
    record = service.lookup(company, title)
    if record is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "No salary data found", "company": company, "title": title},
        )
    return record


@router.get("/company/{company}", response_model=CompanySalaries)
def company_salaries(
    company: str,
    service: SalaryLookupService = Depends(get_lookup_service),
) -> CompanySalaries:
    return service.company_salaries(company)


@router.post("/estimate", response_model=SalaryEstimate)
def estimate_salary(
    payload: EstimateRequest,
    resolver: EstimationResolver = Depends(get_resolver),
) -> SalaryEstimate:
    if not payload.company or not payload.title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Company and title are required"
        )
    return _estimate(resolver, payload)


@router.post("/batch-estimate", response_model=BatchEstimateResponse)
def batch_estimate(
    payload: BatchEstimateRequest,
    resolver: EstimationResolver = Depends(get_resolver),
) -> BatchEstimateResponse:
    estimates = [
        BatchEstimateItem(
            company=job.company,
            title=job.title,
            **_estimate(resolver, job).model_dump(),
        )
        for job in payload.jobs
    ]
    return BatchEstimateResponse(estimates=estimates)


@router.post("/report", response_model=SubmissionResponse)
def submit_report(
    payload: SalaryReportSubmission,
    request: Request,
    user_id: str | None = Depends(get_current_user_id),
    service: SalaryReportService = Depends(get_report_service),
) -> SubmissionResponse:
    result = service.submit(payload, user_id=user_id, ip_address=client_ip(request))
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return SubmissionResponse(success=True, message=REPORT_THANKS, verified=bool(user_id))


@router.get("/stats", response_model=SalaryStats)
def salary_stats(service: SalaryLookupService = Depends(get_lookup_service)) -> SalaryStats:
    return service.stats()
