"""Service layer for fetching, moderating, aggregating and estimating salaries."""

from .aggregator import ReportAggregator
from .background import BackgroundDispatcher, InlineDispatcher, ThreadDispatcher, get_dispatcher
from .company_populator import CompanySalaryPopulator, PopulateResult, TechmapListingSource
from .estimation import (
    ComputedHeuristicStrategy,
    EstimationResolver,
    StoreLookupStrategy,
    SurveyStrategy,
    compute_heuristic_estimate,
    has_company_data,
)
from .external_api import SalaryEstimationApi
from .external_batch import ExternalFetchBatch
from .lookup import SalaryLookupService
from .reports import SalaryReportService
from .scraper import GlassdoorScraper
from .survey import populate_survey

__all__ = [
    "BackgroundDispatcher",
    "CompanySalaryPopulator",
    "ComputedHeuristicStrategy",
    "EstimationResolver",
    "ExternalFetchBatch",
    "GlassdoorScraper",
    "InlineDispatcher",
    "PopulateResult",
    "ReportAggregator",
    "SalaryEstimationApi",
    "SalaryLookupService",
    "SalaryReportService",
    "StoreLookupStrategy",
    "SurveyStrategy",
    "TechmapListingSource",
    "ThreadDispatcher",
    "compute_heuristic_estimate",
    "get_dispatcher",
    "has_company_data",
    "populate_survey",
]
