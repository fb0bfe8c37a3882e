"""Sequential batch fetch from the external estimation API into the record store."""
from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable, Sequence

from salary_engine.core.log import get_logger, timeit
from salary_engine.core.text import normalize
from salary_engine.repositories import SalaryRecordData, SalaryRecordRepository

from .external_api import DEFAULT_TITLE, SalaryEstimationApi
from .scraper import GlassdoorScraper

LOGGER = get_logger(__name__)

BATCH_TITLES: tuple[str, ...] = (
    "Software Engineer",
    "Senior Software Engineer",
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
    "DevOps Engineer",
    "Data Scientist",
    "Product Manager",
    "QA Engineer",
)

BATCH_COMPANIES: tuple[str, ...] = (
    "Google", "Microsoft", "Meta", "Amazon", "Apple", "Nvidia",
    "Wix", "Monday.com", "Fiverr", "Check Point", "CyberArk",
    "Palo Alto Networks", "SentinelOne", "Wiz", "Snyk", "JFrog",
    "AppsFlyer", "SimilarWeb", "Gong", "Mobileye", "Intel",
    "Oracle", "Salesforce", "Nice", "Amdocs", "Playtika",
    "ironSource", "Taboola", "Outbrain", "Payoneer", "Rapyd",
    "Tipalti", "Riskified", "Forter", "Lightricks", "HiBob",
    "Papaya Global", "Deel", "Elbit Systems", "Rafael",
)


class ExternalFetchBatch:
    """Fetch general titles, then one title per company, pausing after every call.

    Calls are strictly sequential to stay within the provider's rate limit;
    ``sleep`` is injectable so tests do not wait.
    """

    def __init__(
        self,
        api: SalaryEstimationApi,
        repository: SalaryRecordRepository,
        *,
        delay_seconds: float = 1.5,
        scraper: GlassdoorScraper | None = None,
        titles: Sequence[str] = BATCH_TITLES,
        companies: Sequence[str] = BATCH_COMPANIES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api = api
        self._repository = repository
        self._delay = delay_seconds
        self._scraper = scraper
        self._titles = tuple(titles)
        self._companies = tuple(companies)
        self._sleep = sleep

    @property
    def total_calls(self) -> int:
        return len(self._titles) + len(self._companies)

    def fetch_pair(self, company: str, title: str) -> SalaryRecordData | None:
        """API first, scrape second; ``None`` when neither produced a range."""

        record = self._api.fetch(company, title)
        if record is None and self._scraper is not None and company:
            try:
                record = self._scraper.fetch(company, title)
            except Exception as exc:
                LOGGER.debug("Scrape fallback failed for %s %s: %s", company, title, exc)
                return None
        return record

    def _store(self, record: SalaryRecordData | None, timer) -> None:
        if record is None:
            timer.fail()
            return
        if self._repository.upsert(record):
            timer.add()
        else:
            timer.fail()

    def run(self, on_progress: Callable[[], None] | None = None) -> int:
        """Run the whole batch; returns the number of records stored."""

        if not self._api.enabled:
            LOGGER.warning("RAPIDAPI_KEY not configured, skipping external fetch")
            return 0

        with timeit("External salary fetch", logger=LOGGER, unit="records", total=self.total_calls) as timer:
            for title in self._titles:
                self._store(self._api.fetch("", title), timer)
                if on_progress:
                    on_progress()
                self._sleep(self._delay)

            for company in self._companies:
                record = self.fetch_pair(company, DEFAULT_TITLE)
                if record is not None:
                    record = replace(
                        record,
                        company_name=company,
                        company_name_normalized=normalize(company),
                    )
                self._store(record, timer)
                if on_progress:
                    on_progress()
                self._sleep(self._delay)
        return timer.count
