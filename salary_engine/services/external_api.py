"""Client for the third-party salary estimation API (Glassdoor data via RapidAPI)."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import httpx

from salary_engine.core.config import ExternalSourceSettings
from salary_engine.core.formatting import glassdoor_salaries_url, round_half_up
from salary_engine.core.log import get_logger
from salary_engine.core.text import normalize
from salary_engine.models import Confidence, SalarySource
from salary_engine.repositories import SalaryRecordData

LOGGER = get_logger(__name__)

DEFAULT_TITLE = "Software Engineer"
GENERAL_COMPANY = "General"

_ANNUAL_PERIODS = {"YEAR", "ANNUAL"}
_CONFIDENCE_MAP = {
    "VERY_HIGH": Confidence.HIGH,
    "HIGH": Confidence.HIGH,
    "MEDIUM": Confidence.MEDIUM,
}


def collapse_confidence(value: str | None) -> Confidence:
    """Map the API's textual confidence onto the three-tier scale."""

    return _CONFIDENCE_MAP.get((value or "").upper(), Confidence.LOW)


def _first_number(data: Mapping[str, Any], *keys: str) -> float:
    for key in keys:
        value = data.get(key)
        if value:
            try:
                return float(value)
            except (TypeError, ValueError):
                continue
    return 0.0


def parse_estimation_response(
    payload: Any,
    *,
    company: str,
    search_title: str,
    exchange_rates: Mapping[str, float],
    target_currency: str = "ILS",
    default_location: str = "Israel",
) -> SalaryRecordData | None:
    """Turn an API response into a monthly, target-currency record.

    Returns ``None`` when the payload is not a successful response, when the
    currency has no configured rate, or when min/max are not both positive.
    """

    if not isinstance(payload, Mapping) or payload.get("status") != "OK":
        return None
    data = payload.get("data")
    if not isinstance(data, Mapping):
        return None

    amounts = [
        round_half_up(_first_number(data, "min_salary", "min_base_salary")),
        round_half_up(_first_number(data, "max_salary", "max_base_salary")),
        round_half_up(_first_number(data, "median_salary", "median_base_salary")),
    ]

    period = str(data.get("salary_period") or "MONTH").upper()
    if period in _ANNUAL_PERIODS:
        amounts = [round_half_up(amount / 12) for amount in amounts]

    currency = str(data.get("salary_currency") or target_currency).upper()
    if currency != target_currency:
        rate = exchange_rates.get(currency)
        if rate is None:
            LOGGER.warning("No exchange rate for %s, discarding %s result", currency, search_title)
            return None
        amounts = [round_half_up(amount * rate) for amount in amounts]

    min_salary, max_salary, median_salary = amounts
    if min_salary <= 0 or max_salary <= 0:
        return None
    if not median_salary:
        median_salary = round_half_up((min_salary + max_salary) / 2)

    job_title = str(data.get("job_title") or search_title)
    company_name = company or GENERAL_COMPANY
    try:
        sample_count = int(data.get("salary_count") or 1)
    except (TypeError, ValueError):
        sample_count = 1

    return SalaryRecordData(
        company_name=company_name,
        company_name_normalized=normalize(company_name),
        job_title=job_title,
        job_title_normalized=normalize(job_title),
        location=str(data.get("location") or default_location),
        min_salary=min_salary,
        max_salary=max_salary,
        median_salary=median_salary,
        currency=target_currency,
        sample_count=sample_count,
        source=SalarySource.EXTERNAL_API.value,
        source_url=data.get("link") or glassdoor_salaries_url(job_title, default_location),
        confidence=collapse_confidence(data.get("confidence")).value,
    )


class SalaryEstimationApi:
    """Thin synchronous wrapper over the ``/salary-estimation`` endpoint."""

    def __init__(
        self,
        settings: ExternalSourceSettings,
        *,
        location: str = "Israel",
        currency: str = "ILS",
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings
        self._location = location
        self._currency = currency
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._settings.api_enabled

    @property
    def endpoint(self) -> str:
        return f"https://{self._settings.api_host}/salary-estimation"

    @contextmanager
    def _http(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(timeout=self._settings.api_timeout_seconds) as client:
            yield client

    def fetch(self, company: str, title: str | None = None) -> SalaryRecordData | None:
        """Fetch one (company, title) estimate; ``None`` on any failure."""

        if not self.enabled:
            LOGGER.info("RAPIDAPI_KEY not configured, skipping external fetch")
            return None

        base_title = title or DEFAULT_TITLE
        search_title = f"{base_title} {company}" if company else base_title
        params = {
            "job_title": search_title,
            "location": self._location,
            "location_type": "ANY",
            "years_of_experience": "ALL",
            "domain": "www.glassdoor.com",
        }
        headers = {
            "X-RapidAPI-Key": self._settings.api_key or "",
            "X-RapidAPI-Host": self._settings.api_host,
        }

        try:
            with self._http() as client:
                response = client.get(self.endpoint, params=params, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            LOGGER.warning("Salary API request failed for %s/%s: %s", company or "-", base_title, exc)
            return None
        except ValueError:
            LOGGER.warning("Salary API returned malformed JSON for %s/%s", company or "-", base_title)
            return None

        LOGGER.debug("Salary API response for %s: %.300s", search_title, payload)
        return parse_estimation_response(
            payload,
            company=company,
            search_title=search_title,
            exchange_rates={"USD": self._settings.usd_to_ils_rate},
            target_currency=self._currency,
            default_location=self._location,
        )
