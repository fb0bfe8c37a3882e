"""Best-effort scrape of the public Glassdoor salary search page.

Glassdoor blocks most automated traffic, so this source fails far more often
than it succeeds. Every failure is logged at debug level and returns ``None``.
"""
from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup

from salary_engine.core.formatting import glassdoor_search_url
from salary_engine.core.log import get_logger
from salary_engine.core.text import normalize
from salary_engine.models import Confidence, SalarySource
from salary_engine.repositories import SalaryRecordData

LOGGER = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

SHEKEL_RANGE = re.compile(r"₪\s*(\d[\d,]*)\s*[-–]\s*₪?\s*(\d[\d,]*)")


def parse_salary_range(html: str) -> tuple[int, int] | None:
    """First ``₪min - ₪max`` range in the page text, or ``None``."""

    text = BeautifulSoup(html, "html.parser").get_text(" ")
    match = SHEKEL_RANGE.search(text)
    if match is None:
        return None
    try:
        low, high = (int(group.replace(",", "")) for group in match.groups())
    except ValueError:
        return None
    if low <= 0 or high <= 0:
        return None
    return min(low, high), max(low, high)


class GlassdoorScraper:
    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        location: str = "Israel",
        currency: str = "ILS",
        client: httpx.Client | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._location = location
        self._currency = currency
        self._client = client

    def _get(self, url: str) -> str:
        headers = {"User-Agent": USER_AGENT, "Accept-Language": "en-US,en;q=0.9"}
        if self._client is not None:
            response = self._client.get(url, headers=headers)
        else:
            response = httpx.get(url, headers=headers, timeout=self._timeout, follow_redirects=True)
        response.raise_for_status()
        return response.text

    def fetch(self, company: str, title: str) -> SalaryRecordData | None:
        url = glassdoor_search_url(title, company)
        try:
            html = self._get(url)
        except httpx.HTTPError as exc:
            LOGGER.debug("Scrape failed for %s %s: %s", company, title, exc)
            return None

        salary_range = parse_salary_range(html)
        if salary_range is None:
            LOGGER.debug("No salary range found on %s", url)
            return None

        min_salary, max_salary = salary_range
        return SalaryRecordData(
            company_name=company,
            company_name_normalized=normalize(company),
            job_title=title,
            job_title_normalized=normalize(title),
            location=self._location,
            min_salary=min_salary,
            max_salary=max_salary,
            median_salary=(min_salary + max_salary) // 2,
            currency=self._currency,
            sample_count=0,
            source=SalarySource.SCRAPED.value,
            source_url=url,
            confidence=Confidence.LOW.value,
        )
