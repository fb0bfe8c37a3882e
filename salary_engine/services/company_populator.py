"""Computed salary records for every company listed in the public techmap job CSVs."""
from __future__ import annotations

import csv
import io
from dataclasses import asdict, dataclass
from typing import Callable, Iterable, Sequence

import httpx

from salary_engine.core.log import get_logger, timeit
from salary_engine.core.text import normalize
from salary_engine.data import SalaryRange, round_to_thousand
from salary_engine.data.heuristics import (
    HIGH_PAYING_COMPANIES,
    INDUSTRY_MULTIPLIERS,
    SIZE_BASE_RANGES,
)
from salary_engine.models import Confidence, SalarySource
from salary_engine.repositories import SalaryRecordData, SalaryRecordRepository

LOGGER = get_logger(__name__)

TECHMAP_CSV_URL = "https://raw.githubusercontent.com/mluggy/techmap/main/jobs/{category}.csv"
TECHMAP_CATEGORIES: tuple[str, ...] = (
    "admin", "business", "data-science", "design", "devops", "finance",
    "frontend", "hardware", "hr", "legal", "marketing", "procurement-operations",
    "product", "project-management", "qa", "sales", "security", "software", "support",
)
POPULATED_TITLE = "Software Engineer"
DEFAULT_SIZE = "m"


@dataclass(frozen=True)
class CompanyListing:
    company: str
    category: str
    size: str


@dataclass
class PopulateResult:
    success: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def parse_listings(text: str) -> list[CompanyListing]:
    """Rows of ``company,category,size``; the header row and short rows are skipped."""

    rows = csv.reader(io.StringIO(text.strip()))
    next(rows, None)
    listings = []
    for values in rows:
        if len(values) < 3:
            continue
        company, category, size = (value.strip() for value in values[:3])
        if company:
            listings.append(CompanyListing(company, category, size))
    return listings


def unique_companies(listings: Iterable[CompanyListing]) -> list[CompanyListing]:
    """Keep the first listing per company, compared case-insensitively."""

    seen: dict[str, CompanyListing] = {}
    for listing in listings:
        seen.setdefault(listing.company.lower(), listing)
    return list(seen.values())


def estimate_company_range(listing: CompanyListing) -> SalaryRange:
    base = SIZE_BASE_RANGES.get(listing.size, SIZE_BASE_RANGES[DEFAULT_SIZE])
    multiplier = INDUSTRY_MULTIPLIERS.get(listing.category, 1.0) * HIGH_PAYING_COMPANIES.get(
        normalize(listing.company), 1.0
    )
    return SalaryRange(
        min=round_to_thousand(base.min * multiplier),
        max=round_to_thousand(base.max * multiplier),
    )


class TechmapListingSource:
    """Downloads the per-category job CSVs; a failed category is logged and skipped."""

    def __init__(
        self,
        *,
        categories: Sequence[str] = TECHMAP_CATEGORIES,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._categories = tuple(categories)
        self._timeout = timeout_seconds
        self._client = client

    def _download(self, url: str) -> str:
        if self._client is not None:
            response = self._client.get(url)
        else:
            response = httpx.get(url, timeout=self._timeout, follow_redirects=True)
        response.raise_for_status()
        return response.text

    def fetch(self) -> list[CompanyListing]:
        listings: list[CompanyListing] = []
        for category in self._categories:
            url = TECHMAP_CSV_URL.format(category=category)
            try:
                listings.extend(parse_listings(self._download(url)))
            except httpx.HTTPError as exc:
                LOGGER.error("Error fetching %s jobs: %s", category, exc)
        companies = unique_companies(listings)
        LOGGER.info("Found %d unique companies across %d categories", len(companies), len(self._categories))
        return companies


class CompanySalaryPopulator:
    def __init__(
        self,
        source: TechmapListingSource,
        repository: SalaryRecordRepository,
        *,
        location: str = "Israel",
        currency: str = "ILS",
    ) -> None:
        self._source = source
        self._repository = repository
        self._location = location
        self._currency = currency

    def _record_for(self, listing: CompanyListing) -> SalaryRecordData:
        salary_range = estimate_company_range(listing)
        return SalaryRecordData(
            company_name=listing.company,
            company_name_normalized=normalize(listing.company),
            job_title=POPULATED_TITLE,
            job_title_normalized=normalize(POPULATED_TITLE),
            location=self._location,
            min_salary=salary_range.min,
            max_salary=salary_range.max,
            median_salary=salary_range.midpoint,
            currency=self._currency,
            sample_count=0,
            source=SalarySource.COMPUTED.value,
            confidence=Confidence.MEDIUM.value,
        )

    def populate(self, on_progress: Callable[[], None] | None = None) -> PopulateResult:
        """Insert an estimate for each company that has no record yet."""

        companies = self._source.fetch()
        result = PopulateResult()
        with timeit("Company salary populate", logger=LOGGER, unit="companies", total=len(companies)) as timer:
            for listing in companies:
                if self._repository.has_company(normalize(listing.company)):
                    result.skipped += 1
                elif self._repository.insert(self._record_for(listing)):
                    result.success += 1
                    timer.add()
                else:
                    result.failed += 1
                    timer.fail()
                if on_progress:
                    on_progress()
        LOGGER.info(
            "Populate complete: %d added, %d skipped, %d failed",
            result.success,
            result.skipped,
            result.failed,
        )
        return result
