"""Batch entry points shared by the admin routes and the operator scripts.

Each job opens its own session so it can outlive the request that triggered it.
"""
from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import sessionmaker

from salary_engine.core.config import Settings
from salary_engine.core.log import get_logger
from salary_engine.db import session_scope
from salary_engine.repositories import SalaryRecordRepository, SalaryReportRepository

from .aggregator import ReportAggregator
from .company_populator import CompanySalaryPopulator, PopulateResult, TechmapListingSource
from .external_api import SalaryEstimationApi
from .external_batch import ExternalFetchBatch
from .scraper import GlassdoorScraper
from .survey import populate_survey

LOGGER = get_logger(__name__)

Progress = Callable[[], None]


def build_external_batch(
    settings: Settings, repository: SalaryRecordRepository, **kwargs
) -> ExternalFetchBatch:
    estimation = settings.estimation
    api = SalaryEstimationApi(
        settings.external,
        location=estimation.default_location,
        currency=estimation.currency,
    )
    scraper = GlassdoorScraper(
        timeout_seconds=settings.external.scrape_timeout_seconds,
        location=estimation.default_location,
        currency=estimation.currency,
    )
    return ExternalFetchBatch(
        api,
        repository,
        delay_seconds=settings.external.request_delay_seconds,
        scraper=scraper,
        **kwargs,
    )


def run_survey_populate(factory: sessionmaker, settings: Settings) -> int:
    with session_scope(factory) as session:
        return populate_survey(
            SalaryRecordRepository(session),
            location=settings.estimation.default_location,
            currency=settings.estimation.currency,
        )


def run_external_fetch(
    factory: sessionmaker, settings: Settings, on_progress: Progress | None = None
) -> int:
    with session_scope(factory) as session:
        batch = build_external_batch(settings, SalaryRecordRepository(session))
        return batch.run(on_progress)


def run_aggregation(factory: sessionmaker, settings: Settings) -> int:
    with session_scope(factory) as session:
        aggregator = ReportAggregator(
            SalaryReportRepository(session),
            SalaryRecordRepository(session),
            location=settings.estimation.default_location,
            currency=settings.estimation.currency,
        )
        return aggregator.aggregate_approved_reports()


def run_company_populate(
    factory: sessionmaker, settings: Settings, on_progress: Progress | None = None
) -> dict[str, int]:
    with session_scope(factory) as session:
        populator = CompanySalaryPopulator(
            TechmapListingSource(timeout_seconds=settings.external.scrape_timeout_seconds),
            SalaryRecordRepository(session),
            location=settings.estimation.default_location,
            currency=settings.estimation.currency,
        )
        result: PopulateResult = populator.populate(on_progress)
        return result.as_dict()


def refresh_all(factory: sessionmaker, settings: Settings) -> dict[str, int]:
    """Survey, then external fetch, then aggregation, one after another."""

    LOGGER.info("Starting full salary data refresh")
    summary = {
        "survey": run_survey_populate(factory, settings),
        "external": run_external_fetch(factory, settings),
        "aggregated": run_aggregation(factory, settings),
    }
    LOGGER.info("Full salary data refresh complete: %s", summary)
    return summary
